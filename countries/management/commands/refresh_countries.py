from django.core.management.base import BaseCommand, CommandError

from countries.errors import CountryServiceError
from countries.refresh import refresh_countries


class Command(BaseCommand):
    help = "Fetch countries and exchange rates and upsert them into the database."

    def handle(self, *args, **options):
        try:
            result = refresh_countries()
        except CountryServiceError as exc:
            raise CommandError(f"Refresh failed: {exc}") from exc

        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {result.applied} countries at {result.refreshed_at.isoformat()} "
            f"in {result.duration_seconds}s"
        ))
        if result.errors:
            self.stdout.write(self.style.WARNING(f"Skipped {len(result.errors)} invalid entries"))
        if not result.image_generated:
            self.stdout.write(self.style.WARNING("Summary image was not generated"))
