"""
Manual end-to-end check against a running server.

Run the server with Cloudflare's always-pass Turnstile test secret
(TURNSTILE_SECRET=1x0000000000000000000000000000000AA), then:

    python verify_leaderboard.py
"""
import sys
import uuid

import httpx

from db import database, models

BASE_URL = "http://localhost:8000"
GAME_ID = 4242
DUMMY_TURNSTILE_TOKEN = "XXXX.DUMMY.TOKEN.XXXX"


def ensure_game_in_db(game_id):
    db_session = database.SessionLocal()
    try:
        if not db_session.get(models.Game, game_id):
            db_session.add(models.Game(game_id=game_id))
            db_session.commit()
            print(f"Created game {game_id}")
    finally:
        db_session.close()


def start_session(client, player_id):
    resp = client.get(f"{BASE_URL}/session", params={"game_id": GAME_ID, "player_id": player_id})
    if resp.status_code != 200:
        print(f"Session failed: {resp.text}")
        sys.exit(1)
    return resp.json()["token"]


def submit(client, player_id, name, score, token):
    return client.post(f"{BASE_URL}/score", json={
        "game_id": GAME_ID,
        "player_name": name,
        "player_id": player_id,
        "player_score": score,
        "session_token": token,
        "turnstile_token": DUMMY_TURNSTILE_TOKEN,
    })


def verify():
    print("Starting verification...")
    ensure_game_in_db(GAME_ID)
    player_id = f"player_{uuid.uuid4().hex[:8]}"

    with httpx.Client() as client:
        print("\n--- Posting valid score ---")
        token = start_session(client, player_id)
        resp = submit(client, player_id, "  Verifier  ", 777, token)
        print(f"Status: {resp.status_code} {resp.text}")
        if resp.status_code != 200:
            sys.exit(1)

        print("\n--- Posting with forged token (expect 401) ---")
        resp = submit(client, player_id, "Verifier", 800, "forged")
        print(f"Status: {resp.status_code}")

        print("\n--- Posting out of range score (expect 400) ---")
        resp = submit(client, player_id, "Verifier", 1001, token)
        print(f"Status: {resp.status_code}")

        print("\n--- Leaderboard ---")
        resp = client.get(f"{BASE_URL}/leaderboard", params={"game": GAME_ID})
        board = resp.json()
        for i, row in enumerate(board, 1):
            print(f"{i:>2}. {row['player_name']:<20} {row['player_score']:>7} {row['created_at']}")

        if not any(row["player_name"] == "Verifier" for row in board):
            print("Submitted score not found in leaderboard")
            sys.exit(1)

    print("\nVerification finished.")


if __name__ == "__main__":
    verify()
