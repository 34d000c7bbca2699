"""Management command to verify the Gemini API connection."""
from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from core.clients.gemini_client import embed_query, generate_response


class Command(BaseCommand):
    help = "Verify Gemini API connection for embeddings and chat"

    def handle(self, *args, **options):
        self.stdout.write("Checking Gemini API connection...\n")

        self.stdout.write("Testing embed_query...")
        try:
            embedding = async_to_sync(embed_query)("[10/02/24, 9:14 PM] Anju: on my way")
            self.stdout.write(self.style.SUCCESS(
                f"  embed_query works! Returned {len(embedding)}-dim vector"
            ))
        except Exception as e:
            self.stdout.write(self.style.ERROR(f"  embed_query failed: {str(e)}"))
            return

        self.stdout.write("\nTesting generate_response...")
        try:
            response = async_to_sync(generate_response)("Say 'Hello' in one word.", temperature=0)
            self.stdout.write(self.style.SUCCESS("  generate_response works!"))
            self.stdout.write(f"  Response: {response[:100]}")
        except Exception as e:
            self.stdout.write(self.style.ERROR(f"  generate_response failed: {str(e)}"))
            return

        self.stdout.write(self.style.SUCCESS("\nGemini API connection successful!"))
