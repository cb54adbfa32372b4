#  (C) Copyright
#  Logivations GmbH, Munich 2025
import io
import logging
from unittest.mock import patch

import pytest

from clients.errors import ConfigError, RemoteError
from report.exporter import apply_overrides, export_groups, main, parse_args
from report.schemas import Group, ReportSummary
from tools.utils import ExportSettings


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)


def test_flags_override_settings():
    args = parse_args(
        ["--client-secret", "secret.json", "--customer", "C123", "--page-size", "100", "--strict-csv"]
    )

    settings = apply_overrides(ExportSettings(), args)

    assert settings.client_secret_file == "secret.json"
    assert settings.customer_id == "C123"
    assert settings.page_size == 100
    assert settings.strict_csv is True
    assert settings.token_file == "token.json"


def test_unset_flags_keep_settings():
    settings = apply_overrides(ExportSettings(customer_id="C9", strict_csv=True), parse_args([]))

    assert settings.customer_id == "C9"
    assert settings.strict_csv is True


def test_export_groups_with_directory_client(fake_directory, page):
    directory = fake_directory([page([Group("g1", "Eng", "eng@co.com", 2, [])])], {"g1": ["a@co.com"]})
    out = io.StringIO()

    summary = export_groups(ExportSettings(customer_id="C1"), out=out, directory_client=directory)

    assert out.getvalue() == 'ID,Name,Address,GroupMemberCount,Aliases,Members\ng1,Eng,eng@co.com,2,"","a@co.com"\n'
    assert summary.groups == 1
    directory.list_groups.assert_called_once_with("C1", 500, None, "email")


def test_export_groups_unknown_locale(fake_directory):
    with pytest.raises(ConfigError):
        export_groups(ExportSettings(header_locale="fr"), directory_client=fake_directory([]))


def test_main_fails_without_client_secret(tmp_path, capsys):
    code = main(
        [
            "--client-secret",
            str(tmp_path / "credentials.json"),
            "--token-file",
            str(tmp_path / "token.json"),
        ]
    )

    assert code == 1
    assert capsys.readouterr().out == ""


def test_main_fails_on_bad_config(tmp_path):
    config = tmp_path / "site.properties"
    config.write_text("[group_export]\npage_size = lots\n")

    assert main(["--config", str(config)]) == 1


@pytest.mark.parametrize("page_size", ["0", "-1"])
def test_non_positive_page_size_flag_raises_config_error(page_size):
    with pytest.raises(ConfigError):
        apply_overrides(ExportSettings(), parse_args(["--page-size", page_size]))


def test_main_fails_on_non_positive_page_size_flag():
    with patch("report.exporter.export_groups") as export_groups_mock:
        assert main(["--page-size", "0"]) == 1

    export_groups_mock.assert_not_called()


def test_main_returns_zero_on_success():
    with patch("report.exporter.export_groups") as export_groups_mock:
        export_groups_mock.return_value = ReportSummary(pages=1, groups=3)

        assert main(["--customer", "C1"]) == 0

    settings = export_groups_mock.call_args.args[0]
    assert settings.customer_id == "C1"


def test_main_fails_on_remote_error(capsys):
    with patch("report.exporter.export_groups") as export_groups_mock:
        export_groups_mock.side_effect = RemoteError("retrieve group lists in domain")

        assert main([]) == 1

    assert "retrieve group lists in domain" in capsys.readouterr().err
