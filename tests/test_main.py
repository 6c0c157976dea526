import json
from types import SimpleNamespace

from crpt_client.config.settings import Settings
from crpt_client.main import run


class _Sender:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text
        self.requests: list = []

    def send(self, request):
        self.requests.append(request)
        return SimpleNamespace(status_code=self.status_code, text=self.text)


def _settings(**overrides) -> Settings:
    values = {"time_unit": "MILLISECONDS", "request_limit": 10, "token": "env-token", "signature": "env-sig"}
    values.update(overrides)
    return Settings(**values)


def test_run_submits_document_and_prints_response(tmp_path, capsys) -> None:
    path = tmp_path / "doc.json"
    path.write_text(json.dumps({"doc_id": "DOC1", "importRequest": False}))
    sender = _Sender(201, '{"value":"created"}')

    code = run([str(path), "--group", "3"], settings=_settings(), sender=sender)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"value": "created"}
    assert sender.requests[0].url.endswith("?pg=tobacco")
    assert sender.requests[0].headers["Authorization"] == "Bearer env-token"


def test_run_returns_one_on_failure_response(tmp_path, capsys) -> None:
    path = tmp_path / "doc.json"
    path.write_text(json.dumps({"doc_id": "DOC1"}))

    code = run([str(path), "--token", "cli-token"], settings=_settings(), sender=_Sender(401, "Unauthorized"))

    assert code == 1
    assert json.loads(capsys.readouterr().out)["code"] == "401"


def test_run_reports_missing_signature_as_invalid_params(tmp_path, capsys) -> None:
    path = tmp_path / "doc.json"
    path.write_text("{}")

    code = run([str(path)], settings=_settings(signature=None), sender=_Sender(201, "{}"))

    assert code == 1
    assert json.loads(capsys.readouterr().out)["code"] == "INVALID_PARAMS"


def test_run_rejects_unreadable_document(tmp_path, capsys) -> None:
    missing = tmp_path / "missing.json"
    assert run([str(missing)], settings=_settings(), sender=_Sender(201, "{}")) == 2

    not_object = tmp_path / "list.json"
    not_object.write_text("[1, 2]")
    assert run([str(not_object)], settings=_settings(), sender=_Sender(201, "{}")) == 2
    assert "cannot load document" in capsys.readouterr().err


def test_run_rejects_invalid_configuration(tmp_path, capsys) -> None:
    path = tmp_path / "doc.json"
    path.write_text("{}")
    assert run([str(path)], settings=_settings(request_limit=0), sender=_Sender(201, "{}")) == 2
    assert run([str(path)], settings=_settings(time_unit="FORTNIGHTS"), sender=_Sender(201, "{}")) == 2
