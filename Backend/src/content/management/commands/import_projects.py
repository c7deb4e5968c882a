from django.core.management.base import BaseCommand, CommandError

from content import services
from content.errors import ContentError
from content.importer import BulkImporter
from content.session import Principal, SessionContext


class Command(BaseCommand):
    help = "Importe des projets depuis un fichier JSON (tableau d'objets projet)."

    def add_arguments(self, parser):
        parser.add_argument("path", type=str)
        parser.add_argument("--dry-run", action="store_true", help="Affiche l'aperçu sans rien écrire")

    def handle(self, *args, **opts):
        importer = BulkImporter(services.get_store(), SessionContext(Principal(uid="cli")))
        try:
            with open(opts["path"], "rb") as fh:
                projects = importer.load_file(fh)
        except OSError as e:
            raise CommandError(f"Lecture de {opts['path']} impossible: {e}") from e
        except ContentError as e:
            raise CommandError(str(e)) from e

        if opts["dry_run"]:
            for project in projects:
                self.stdout.write(f"- {project.title} [{project.status.value}]")
            self.stdout.write(self.style.NOTICE(f"{len(projects)} projet(s) seraient importés"))
            importer.back()
            return

        report = importer.run()
        for error in report["errors"]:
            self.stderr.write(self.style.ERROR(error))
        style = self.style.SUCCESS if not report["errors"] else self.style.WARNING
        self.stdout.write(style(f"{report['successCount']}/{report['progress']['total']} projet(s) importé(s)"))
        importer.close()
