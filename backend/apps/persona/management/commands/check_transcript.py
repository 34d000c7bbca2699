from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.persona.tools.transcript_parser import filter_by_sender, parse_transcript


class Command(BaseCommand):
    help = 'Parse a chat export and report what the loader would keep'

    def add_arguments(self, parser):
        parser.add_argument('--file', default='_chat.txt', help='Path to the exported chat')
        parser.add_argument('--persona', required=True, help='Sender name to keep (case-sensitive)')

    def handle(self, *args, **options):
        path = Path(options['file'])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        text = path.read_text(encoding='utf-8')
        lines = [line for line in text.splitlines() if line.strip()]
        records = parse_transcript(text)
        kept = filter_by_sender(records, options['persona'])
        senders = sorted({record.sender for record in records})

        self.stdout.write("\n=== Transcript Check ===\n")
        self.stdout.write(f"Non-blank lines: {len(lines)}")
        self.stdout.write(f"Parsed records: {len(records)}")
        self.stdout.write(f"Senders: {senders}")
        self.stdout.write(f"Lines from {options['persona']}: {len(kept)}")

        for record in kept[:5]:
            self.stdout.write(f"  {record.format()[:100]}")

        if not kept:
            self.stdout.write(self.style.WARNING("\nNo lines matched the persona name"))
            return

        self.stdout.write(self.style.SUCCESS("\n✓ Transcript check complete"))
