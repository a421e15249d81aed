import pytest

from balltickets import db
from balltickets.errors import AdminValidationError
from balltickets.models import Buyer, BuyerGroup
from balltickets.services.alumni_import_service import import_alumni
from balltickets.utils import is_valid_email


def test_import_creates_alumni_buyers(app, seeded):
    csv_content = "email,name\nmax@example.com,Max Muster\nLISA@Example.com , Lisa Berger\n"

    with app.app_context():
        results = import_alumni(csv_content)

        assert results == {'created': 2, 'updated': 0, 'skipped': 0, 'errors': []}
        lisa = Buyer.query.filter_by(email='lisa@example.com').first()
        assert lisa.name == 'Lisa Berger'
        assert lisa.group.name == 'Absolventen'
        assert lisa.verified is False


def test_import_without_header(app, seeded):
    with app.app_context():
        results = import_alumni("max@example.com,Max Muster")

    assert results['created'] == 1


def test_reimport_skips_unchanged_buyers(app, seeded):
    csv_content = "email,name\nmax@example.com,Max Muster\n"

    with app.app_context():
        import_alumni(csv_content)
        results = import_alumni(csv_content)

        assert Buyer.query.count() == 1

    assert results['created'] == 0
    assert results['skipped'] == 1


def test_import_moves_existing_buyer_into_alumni_group(app, buyer, seeded):
    with app.app_context():
        results = import_alumni("anna@example.com,Anna Gast")
        anna = db.session.get(Buyer, buyer.id)

        assert anna.group_id == seeded.alumni_group_id

    assert results['updated'] == 1


def test_import_reports_bad_lines_and_continues(app, seeded):
    csv_content = "\n".join([
        "email,name",
        "max@example.com;Max Muster",
        "not-an-email,Someone",
        "lisa@example.com,",
        "justonefield",
        "eva@example.com,Eva Lang",
    ])

    with app.app_context():
        results = import_alumni(csv_content)

        assert Buyer.query.count() == 1

    assert results['created'] == 1
    assert len(results['errors']) == 4
    assert results['errors'][0].startswith("Zeile 2: Semikolon")
    assert "Zeile 3" in results['errors'][1]
    assert "Name fehlt" in results['errors'][2]


def test_semicolon_line_with_comma_in_name_is_not_imported(app, seeded):
    with app.app_context():
        results = import_alumni("email;name\nmax@example.com;Muster, Max\n")

        assert Buyer.query.count() == 0

    assert results['created'] == 0
    assert len(results['errors']) == 2
    assert results['errors'][1].startswith("Zeile 2: Semikolon")


@pytest.mark.parametrize('email', ['max@example.com;muster', 'max,x@example.com', 'max@exa;mple.com'])
def test_email_with_delimiters_is_invalid(email):
    assert not is_valid_email(email)


def test_import_creates_missing_alumni_group(app):
    with app.app_context():
        results = import_alumni("max@example.com,Max Muster")
        group = BuyerGroup.get_by_name('Absolventen')

        assert group is not None
        assert group.buyers.count() == 1

    assert results['created'] == 1


def test_import_rejects_empty_content(app, seeded):
    with app.app_context():
        with pytest.raises(AdminValidationError):
            import_alumni("   \n")


def test_import_route_accepts_pasted_csv(client, auth, import_user):
    auth.login_staff(email='import@example.com')

    response = client.post('/backend/import-alumni', json={'csvContent': "max@example.com,Max Muster"})

    assert response.status_code == 200
    assert response.json['created'] == 1


def test_import_route_accepts_file_upload(client, auth, admin_user):
    from io import BytesIO
    auth.login_staff()

    response = client.post(
        '/backend/import-alumni',
        data={'file': (BytesIO("\ufeffemail,name\nmax@example.com,Max Muster\n".encode('utf-8')), 'alumni.csv')},
        content_type='multipart/form-data',
    )

    assert response.status_code == 200
    assert 'Neu angelegt: 1'.encode() in response.data
