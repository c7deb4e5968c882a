from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from content import services
from content.errors import ContentError
from content.exporter import EXPORT_TARGETS, Exporter
from content.session import Principal, SessionContext


class Command(BaseCommand):
    help = "Exporte une collection (projects, audio) ou tout le contenu dans un fichier JSON."

    def add_arguments(self, parser):
        parser.add_argument("target", choices=EXPORT_TARGETS)
        parser.add_argument("--output", type=str, default="", help="Fichier de sortie (nom daté par défaut)")
        parser.add_argument("--by", type=str, default="", help="E-mail inscrit dans exportedBy")

    def handle(self, *args, **opts):
        session = SessionContext(Principal(uid="cli", email=opts["by"])) if opts["by"] else SessionContext()
        try:
            document = Exporter(services.get_store(), session).build(opts["target"])
        except ContentError as e:
            raise CommandError(str(e)) from e

        path = Path(opts["output"] or document.filename)
        path.write_bytes(document.render())
        self.stdout.write(self.style.SUCCESS(f"{document.count} document(s) exporté(s) dans {path}"))
