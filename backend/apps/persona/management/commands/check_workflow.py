from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from apps.persona.graph.workflow import workflow_manager
from apps.persona.sessions import Session

SAMPLE_TRANSCRIPT = """[10/02/24, 9:14 PM] Anju: on my way, save me a seat
[10/02/24, 9:15 PM] Me: ok hurry up
[10/02/24, 9:20 PM] Anju: traffic is crazyyy
[10/02/24, 9:31 PM] Anju: here!! where r u"""


class Command(BaseCommand):
    help = 'Test the LangGraph workflow against the live provider'

    def handle(self, *args, **options):
        session = Session(transcript_text=SAMPLE_TRANSCRIPT, persona_name="Anju")

        self.stdout.write("\n=== LangGraph Workflow Test ===\n")

        async_to_sync(workflow_manager.prime)(session)
        session.processing = False
        self.stdout.write(f"  Loaded messages: {len(session.messages)}")
        self.stdout.write(f"  Index built: {session.similarity_index is not None}")

        for query in ["where are you?", "why are you late"]:
            reply = async_to_sync(workflow_manager.run_turn)(session, query)
            self.stdout.write(f"\nQuery: '{query}'")
            self.stdout.write(f"  Response: {reply[:100]}")
            self.stdout.write("-" * 50)

        self.stdout.write(self.style.SUCCESS("\n✓ Workflow test complete"))
