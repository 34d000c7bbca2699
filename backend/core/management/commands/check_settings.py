"""Management command to verify Pydantic settings are working."""
from django.core.management.base import BaseCommand

from settings import settings


class Command(BaseCommand):
    help = "Verify Pydantic settings are loaded correctly"

    def handle(self, *args, **options):
        self.stdout.write("Checking Pydantic settings...\n")

        self.stdout.write(f"  DJANGO_DEBUG: {settings.django_debug}")
        self.stdout.write(f"  ALLOWED_HOSTS: {settings.allowed_hosts_list}")

        # Show if configured, not the actual value
        google_api = "configured" if settings.google_api_key else "NOT SET"
        self.stdout.write(f"  GOOGLE_API_KEY: {google_api}")
        self.stdout.write(f"  CHAT_MODEL: {settings.chat_model}")
        self.stdout.write(f"  EMBEDDING_MODEL: {settings.embedding_model}")

        self.stdout.write(
            f"  INDEXING: batch_size={settings.index_batch_size} "
            f"concurrency={settings.index_concurrency} delay={settings.index_batch_delay}s"
        )
        self.stdout.write(
            f"  RETRY: attempts={settings.index_max_attempts} "
            f"base={settings.index_retry_base_delay}s factor={settings.index_retry_factor}"
        )
        self.stdout.write(f"  HISTORY_WINDOW: {settings.history_window}")
        self.stdout.write(f"  RETRIEVAL_K: {settings.retrieval_k}")

        self.stdout.write(self.style.SUCCESS("\nSettings loaded successfully!"))
