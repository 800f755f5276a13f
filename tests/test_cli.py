"""
Tests for the command line and the console prompt.
"""

import io
from datetime import datetime, timezone

import pytest

from cims_scraper import __main__ as cli
from cims_scraper.base import RunResult
from cims_scraper.console import ConsolePrompt
from cims_scraper.exceptions import NetworkError


class TestConsolePrompt:
    """Test the go/no-go prompt."""

    def test_accepts_s(self):
        assert ConsolePrompt(ask=lambda q: 's', out=io.StringIO()).confirm_proceed() is True
        assert ConsolePrompt(ask=lambda q: ' S ', out=io.StringIO()).confirm_proceed() is True

    def test_declines_anything_else(self):
        out = io.StringIO()
        assert ConsolePrompt(ask=lambda q: 'n', out=out).confirm_proceed() is False
        assert 'aturar' in out.getvalue()
        assert ConsolePrompt(ask=lambda q: '', out=io.StringIO()).confirm_proceed() is False

    def test_eof_declines(self):
        def closed(question):
            raise EOFError

        assert ConsolePrompt(ask=closed, out=io.StringIO()).confirm_proceed() is False


class TestMain:
    """Test argument handling and exit codes."""

    @pytest.fixture(autouse=True)
    def no_logging_setup(self, monkeypatch):
        monkeypatch.setattr(cli, "configure_logging", lambda settings: None)

    def fake_pipeline(self, calls, result=None, error=None):
        async def run_pipeline(settings):
            calls.append(settings)
            if error:
                raise error
            return result
        return run_pipeline

    def test_success(self, monkeypatch, tmp_path, capsys):
        calls = []
        result = RunResult(source='FEEC', started_at=datetime.now(timezone.utc), total=25,
                           output_path=str(tmp_path / 'o.json'))
        monkeypatch.setattr(cli, 'run_pipeline', self.fake_pipeline(calls, result=result))

        code = cli.main(['--yes', '--concurrency', '5', '--output', str(tmp_path / 'o.json')])

        assert code == 0
        settings = calls[0]
        assert settings.max_concurrent_requests == 5
        assert settings.output_file == str(tmp_path / 'o.json')
        assert '25' in capsys.readouterr().out

    def test_prompt_asked_before_run(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, 'run_pipeline', self.fake_pipeline(calls))
        monkeypatch.setattr(cli, 'ConsolePrompt', lambda: ConsolePrompt(ask=lambda q: 'n', out=io.StringIO()))

        assert cli.main([]) == 0
        assert calls == []

    def test_accepted_prompt_runs_pipeline(self, monkeypatch, tmp_path):
        calls = []
        result = RunResult(source='FEEC', started_at=datetime.now(timezone.utc), total=3,
                           output_path=str(tmp_path / 'o.json'))
        monkeypatch.setattr(cli, 'run_pipeline', self.fake_pipeline(calls, result=result))
        monkeypatch.setattr(cli, 'ConsolePrompt', lambda: ConsolePrompt(ask=lambda q: 'S', out=io.StringIO()))

        assert cli.main([]) == 0
        assert len(calls) == 1

    def test_failure_exit_code(self, monkeypatch, capsys):
        calls = []
        error = NetworkError('https://www.feec.cat/', 'GET request failed')
        monkeypatch.setattr(cli, 'run_pipeline', self.fake_pipeline(calls, error=error))

        assert cli.main(['--yes']) == 1
        assert 'GET request failed' in capsys.readouterr().err

    def test_unexpected_error_exit_code(self, monkeypatch, capsys):
        calls = []
        monkeypatch.setattr(cli, 'run_pipeline', self.fake_pipeline(calls, error=ValueError('bad markup')))

        assert cli.main(['--yes']) == 1
        err = capsys.readouterr().err
        assert 'Alguna cosa ha anat malament' in err
        assert 'ValueError: bad markup' in err
