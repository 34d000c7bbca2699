import asyncio
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.persona.graph.workflow import workflow_manager
from apps.persona.sessions import Session


class Command(BaseCommand):
    help = 'Chat with a persona from a local transcript file'

    def add_arguments(self, parser):
        parser.add_argument('--file', default='_chat.txt', help='Path to the exported chat')
        parser.add_argument('--persona', required=True, help='Sender name to mimic (case-sensitive)')

    def handle(self, *args, **options):
        path = Path(options['file'])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        session = Session(
            transcript_text=path.read_text(encoding='utf-8'),
            persona_name=options['persona']
        )
        asyncio.run(self._chat(session))

    async def _chat(self, session: Session):
        async def show_progress(session_id: str, percent: int):
            self.stdout.write(f"  indexing... {percent}%")

        await workflow_manager.prime(session, on_progress=show_progress)
        session.processing = False
        self.stdout.write(self.style.SUCCESS(
            f"Loaded {len(session.docs)} messages from {session.persona_name}."
        ))
        self.stdout.write("\nYou can now enter your queries (type 'exit' to quit):")

        loop = asyncio.get_running_loop()
        while True:
            try:
                line = await loop.run_in_executor(None, input, "> ")
            except EOFError:
                break

            if line.strip().lower() == "exit":
                break
            if not line.strip():
                continue

            reply = await workflow_manager.run_turn(session, line)
            self.stdout.write(f"\n{session.persona_name}: {reply or '[No response generated]'}\n")

        self.stdout.write("Exiting chat. Goodbye!")
