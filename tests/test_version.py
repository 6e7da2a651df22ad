import pytest

import hmmpath
from hmmpath import version
from hmmpath.cli import main as cli_main


def test_package_reexports_version() -> None:
    assert hmmpath.__version__ == version.__version__
    assert version.__version__.count(".") == 2


def test_cli_reports_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        cli_main.main(["--version"])

    assert info.value.code == 0
    assert capsys.readouterr().out.strip() == f"hmmpath {version.__version__}"
