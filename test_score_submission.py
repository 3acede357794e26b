import pytest

from conftest import FIXED_NOW_MS
from db.models import Score
from utils.session_tokens import issue_token

SECRET = "test-session-secret"
WINDOW_MS = 180_000


def make_body(**overrides):
    body = {
        "game_id": 42,
        "player_name": "Alice",
        "player_id": "player-1",
        "player_score": 500,
        "session_token": issue_token(SECRET, 42, "player-1", FIXED_NOW_MS),
        "turnstile_token": "XXXX.DUMMY.TOKEN.XXXX",
    }
    body.update(overrides)
    return body


def test_valid_submission_creates_exactly_one_row(client, db_session, game):
    response = client.post("/score", json=make_body())

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    rows = db_session.query(Score).all()
    assert len(rows) == 1
    assert rows[0].game_id == 42
    assert rows[0].player_id == "player-1"
    assert rows[0].player_score == 500
    assert rows[0].created_at == "2026-10-18T10:00:30.000Z"


def test_name_and_id_are_trimmed(client, db_session, game):
    token = issue_token(SECRET, 42, " player-1 ", FIXED_NOW_MS)
    response = client.post(
        "/score",
        json=make_body(player_name=" Alice ", player_id=" player-1 ", session_token=token),
    )

    assert response.status_code == 200
    row = db_session.query(Score).one()
    assert row.player_name == "Alice"
    assert row.player_id == "player-1"


@pytest.mark.parametrize("score", [0, 1000, 999.5])
def test_score_bounds_accepted(client, game, score):
    response = client.post("/score", json=make_body(player_score=score))
    assert response.status_code == 200


@pytest.mark.parametrize("score", [1001, -1, 1000.01])
def test_score_out_of_range_rejected(client, db_session, game, score):
    response = client.post("/score", json=make_body(player_score=score))
    assert response.status_code == 400
    assert db_session.query(Score).count() == 0


@pytest.mark.parametrize(
    "field,value",
    [
        ("player_name", "  "),
        ("player_name", ""),
        ("player_id", "   "),
        ("player_name", 7),
        ("player_score", "500"),
        ("player_score", True),
        ("game_id", "42"),
        ("game_id", 42.5),
        ("game_id", True),
        ("session_token", None),
        ("turnstile_token", 123),
    ],
)
def test_invalid_fields_rejected(client, db_session, game, field, value):
    response = client.post("/score", json=make_body(**{field: value}))
    assert response.status_code == 400
    assert response.json()["error"] == 400
    assert db_session.query(Score).count() == 0


def test_integral_float_game_id_accepted(client, db_session, game):
    # The token was issued for the "42" query string; 42.0 is the same game
    response = client.post("/score", json=make_body(game_id=42.0))

    assert response.status_code == 200
    assert db_session.query(Score).one().game_id == 42


def test_missing_field_rejected(client, game):
    body = make_body()
    del body["turnstile_token"]
    response = client.post("/score", json=body)
    assert response.status_code == 400


def test_malformed_json_rejected(client, game):
    response = client.post(
        "/score", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400


def test_validation_runs_before_session_check(client, verifier, game):
    response = client.post("/score", json=make_body(player_score=2000, session_token="forged"))
    assert response.status_code == 400
    assert verifier.calls == []


def test_token_from_previous_window_accepted(client, clock, game):
    body = make_body()
    clock.now_ms = FIXED_NOW_MS + WINDOW_MS
    response = client.post("/score", json=body)
    assert response.status_code == 200


def test_token_from_two_windows_prior_rejected(client, clock, db_session, game):
    body = make_body()
    clock.now_ms = FIXED_NOW_MS + 2 * WINDOW_MS
    response = client.post("/score", json=body)
    assert response.status_code == 401
    assert db_session.query(Score).count() == 0


def test_forged_token_rejected_even_with_valid_turnstile(client, verifier, db_session, game):
    forged = issue_token("not-the-server-secret", 42, "player-1", FIXED_NOW_MS)
    response = client.post("/score", json=make_body(session_token=forged))

    assert response.status_code == 401
    # Session check short-circuits before the verifier is called
    assert verifier.calls == []
    assert db_session.query(Score).count() == 0


def test_token_for_other_player_rejected(client, game):
    other = issue_token(SECRET, 42, "player-2", FIXED_NOW_MS)
    response = client.post("/score", json=make_body(session_token=other))
    assert response.status_code == 401


def test_failed_human_verification_rejected(client, verifier, db_session, game):
    verifier.result = False
    response = client.post("/score", json=make_body())

    assert response.status_code == 401
    assert verifier.calls == [("XXXX.DUMMY.TOKEN.XXXX", "testclient")]
    assert db_session.query(Score).count() == 0


def test_client_ip_taken_from_cloudflare_header(client, verifier, game):
    response = client.post(
        "/score", json=make_body(), headers={"CF-Connecting-IP": "203.0.113.7"}
    )
    assert response.status_code == 200
    assert verifier.calls == [("XXXX.DUMMY.TOKEN.XXXX", "203.0.113.7")]


def test_unknown_game_returns_404_and_writes_nothing(client, db_session):
    response = client.post("/score", json=make_body())

    assert response.status_code == 404
    assert db_session.query(Score).count() == 0


def test_verifier_failure_returns_500_with_cors(client, verifier, db_session, game, caplog):
    def boom(token, remote_ip):
        raise RuntimeError("siteverify down")

    verifier.check = boom
    response = client.post("/score", json=make_body())

    assert response.status_code == 500
    assert response.json()["error"] == 500
    assert response.headers["access-control-allow-origin"] == "https://words.socolagames.com"
    assert db_session.query(Score).count() == 0
    # One line from the app; the traceback is left to the server
    records = [r for r in caplog.records if r.name == "main" and r.levelname == "ERROR"]
    assert len(records) == 1
    assert "siteverify down" in records[0].getMessage()
    assert records[0].exc_info is None
