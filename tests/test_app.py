import pytest

from app import create_app
from config.config import ProductionConfig
from repositories.member_repository import MemberRepository


def test_production_config_requires_secrets():
    with pytest.raises(RuntimeError, match="ACCESS_TOKEN_SECRET"):
        create_app(ProductionConfig)


def test_uncaught_error_is_terse_json(app, caplog):
    @app.route("/_boom")
    def boom():
        raise RuntimeError("secret detail")

    resp = app.test_client().get("/_boom")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal Server Error"}
    assert "Unhandled error" in caplog.text


def test_create_admin_command(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "create-admin", "--email", "head@library.org", "--password", "admin-pass-1",
        "--phone", "07111111111",
    ])

    assert result.exit_code == 0, result.output
    with app.app_context():
        admin = MemberRepository().get_by_email("head@library.org")
        assert admin.is_admin()


def test_create_admin_command_reports_validation_errors(app):
    result = app.test_cli_runner().invoke(args=[
        "create-admin", "--email", "head@library.org", "--password", "short", "--phone", "07111111111",
    ])

    assert result.exit_code != 0
    assert "password" in result.output


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert "Initialized the database." in result.output


def test_base_config_accepts_defaults():
    from config.config import Config

    assert Config.validate() is None
