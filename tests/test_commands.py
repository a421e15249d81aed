from balltickets.models import BackendUser, BuyerGroup, DeliveryMethod, TicketType, SystemSettings


def test_seed_data_is_idempotent(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-data'])
    assert "Created buyer group 'Öffentlich'" in result.output

    result = runner.invoke(args=['seed-data'])
    assert "Nothing to do" in result.output

    with app.app_context():
        assert BuyerGroup.query.count() == 2
        assert DeliveryMethod.query.count() == 2
        assert TicketType.query.count() == 2
        assert SystemSettings.query.count() == 1


def test_create_backend_user(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-backend-user', '--email', 'Chef@Example.com', '--first-name', 'Eva',
        '--sur-name', 'Lang', '--group', 'Import', '--password', 'geheim123',
    ])

    assert "Successfully created backend user" in result.output
    with app.app_context():
        user = BackendUser.query.filter_by(email='chef@example.com').first()
        assert user.group_name == 'Import'
        assert user.check_password('geheim123')


def test_create_backend_user_rejects_duplicates(app, admin_user):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-backend-user', '--email', 'admin@example.com', '--first-name', 'X',
        '--sur-name', 'Y', '--password', 'pw',
    ])

    assert "already exists" in result.output
