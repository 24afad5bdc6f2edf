"""Tests for meetingintel.run_analysis — the offline CLI runner."""
from __future__ import annotations

from unittest.mock import patch

import pytest
import requests

from meetingintel.run_analysis import cli, main
from tests.conftest import make_response


@pytest.fixture
def transcript_file(tmp_path, sample_transcript):
    path = tmp_path / "reunion.txt"
    path.write_text(sample_transcript, encoding="utf-8")
    return str(path)


class TestRunAnalysis:

    @patch("meetingintel.openai_client.requests.post")
    def test_preview_only_by_default(self, mock_post, transcript_file, capsys):
        assert main(["--transcript", transcript_file, "--section", "roi"]) == 0
        out = capsys.readouterr().out
        assert "Section: roi" in out
        assert "max_tokens: 4000" in out
        assert "--call-model" in out
        mock_post.assert_not_called()

    def test_short_transcript_rejected(self, tmp_path, capsys):
        path = tmp_path / "corto.txt"
        path.write_text("hola", encoding="utf-8")
        assert main(["--transcript", str(path)]) == 2
        assert "Invalid input" in capsys.readouterr().out

    def test_call_model_requires_key(self, transcript_file, no_api_key, capsys):
        assert main(["--transcript", transcript_file, "--call-model"]) == 2
        assert "OPENAI_API_KEY" in capsys.readouterr().out

    @patch("meetingintel.openai_client.requests.post")
    def test_call_model_prints_markdown(self, mock_post, transcript_file, api_key, capsys):
        mock_post.return_value = make_response(
            200, {"choices": [{"message": {"content": "# Informe"}}]}
        )
        code = main([
            "--transcript", transcript_file,
            "--participants", "Ana, Luis",
            "--title", "Kickoff",
            "--call-model",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "# Informe" in out
        assert '"meetingTitle": "Kickoff"' in out
        user_prompt = mock_post.call_args.kwargs["json"]["messages"][1]["content"]
        assert 'participants: ["Ana", "Luis"]' in user_prompt

    @patch("meetingintel.openai_client.requests.post")
    def test_provider_error_exit_code(self, mock_post, transcript_file, api_key, capsys):
        mock_post.return_value = make_response(500, text="upstream down")
        assert main(["--transcript", transcript_file, "--call-model"]) == 1
        assert "upstream down" in capsys.readouterr().out

    @patch("meetingintel.openai_client.requests.post")
    def test_network_error_exit_code(self, mock_post, transcript_file, api_key, capsys):
        mock_post.side_effect = requests.Timeout("read timed out")
        assert main(["--transcript", transcript_file, "--call-model"]) == 1
        assert "read timed out" in capsys.readouterr().out

    @patch("meetingintel.run_analysis.main", return_value=0)
    @patch("meetingintel.run_analysis.setup_logging")
    def test_console_entry_sets_up_logging(self, mock_setup, mock_main):
        with pytest.raises(SystemExit) as excinfo:
            cli()
        assert excinfo.value.code == 0
        mock_setup.assert_called_once()
        mock_main.assert_called_once_with()
