from flask import current_app

from .. import db
from ..models import Buyer, BuyerGroup
from ..errors import AdminValidationError
from ..utils import normalize_email, is_valid_email

HEADER_FIELDS = ('email', 'e-mail')


class AlumniImportService:
    """
    Imports alumni from `email,name` lines into the alumni buyer group.

    Each line is upserted independently; problems on one line are
    reported and do not stop the rest of the import.
    """

    def __init__(self, csv_content):
        self.csv_content = csv_content or ''
        self.created = 0
        self.updated = 0
        self.skipped = 0
        self.errors = []
        self.group = None

    def _get_or_create_group(self):
        name = current_app.config['ALUMNI_GROUP_NAME']
        group = BuyerGroup.get_by_name(name)
        if group is None:
            group = BuyerGroup(
                name=name,
                max_tickets=current_app.config['DEFAULT_MAX_TICKETS'],
                updated_by='Import',
            )
            db.session.add(group)
            db.session.flush()
            current_app.logger.info(f"Created buyer group '{name}' during alumni import")
        return group

    @staticmethod
    def _is_header(line):
        first_field = line.split(',', 1)[0].strip().strip('"').lower()
        return first_field in HEADER_FIELDS

    def _parse_line(self, line_no, line):
        """Return (email, name) or None after recording an error."""
        # A semicolon in the email field means the file uses ; as delimiter
        if ';' in line.split(',', 1)[0]:
            self.errors.append(
                f"Zeile {line_no}: Semikolon als Trennzeichen erkannt. "
                f"Bitte verwenden Sie Kommas (email,name).")
            return None

        parts = line.split(',', 1)
        if len(parts) < 2:
            self.errors.append(f"Zeile {line_no}: Ungültiges Format, erwartet wird email,name")
            return None

        email = normalize_email(parts[0].strip().strip('"'))
        name = parts[1].strip().strip('"').strip()

        if not is_valid_email(email):
            self.errors.append(f"Zeile {line_no}: Ungültige E-Mail-Adresse '{parts[0].strip()}'")
            return None
        if not name:
            self.errors.append(f"Zeile {line_no}: Name fehlt")
            return None
        return email, name

    def _upsert(self, email, name):
        buyer = Buyer.query.filter_by(email=email).first()
        if buyer is None:
            db.session.add(Buyer(
                email=email,
                name=name,
                group=self.group,
                max_tickets=self.group.max_tickets,
                verified=False,
            ))
            db.session.flush()
            self.created += 1
            return

        changed = False
        if buyer.group_id != self.group.id:
            buyer.group = self.group
            buyer.max_tickets = self.group.max_tickets
            changed = True
        if not buyer.name:
            buyer.name = name
            changed = True

        if changed:
            self.updated += 1
        else:
            self.skipped += 1

    def run(self):
        if not self.csv_content.strip():
            raise AdminValidationError("Die CSV-Datei ist leer.")

        self.group = self._get_or_create_group()

        seen_content = False
        for line_no, raw_line in enumerate(self.csv_content.splitlines(), start=1):
            line = raw_line.lstrip('\ufeff').strip()
            if not line:
                continue
            if not seen_content:
                seen_content = True
                if self._is_header(line):
                    continue

            parsed = self._parse_line(line_no, line)
            if parsed is None:
                continue
            self._upsert(*parsed)

        db.session.commit()
        current_app.logger.info(
            f"Alumni import finished: {self.created} created, {self.updated} updated, "
            f"{self.skipped} skipped, {len(self.errors)} errors")
        return self.result()

    def result(self):
        return {
            'created': self.created,
            'updated': self.updated,
            'skipped': self.skipped,
            'errors': list(self.errors),
        }


def import_alumni(csv_content):
    return AlumniImportService(csv_content).run()
