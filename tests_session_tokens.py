import unittest

from utils.session_tokens import issue_token, sign, time_window, verify_token

SECRET = "unit-secret"
WINDOW_MS = 180_000
# Start of a window
T0 = 9_957_320 * WINDOW_MS


class TestSessionTokens(unittest.TestCase):
    def test_time_window_boundaries(self):
        self.assertEqual(time_window(T0), 9_957_320)
        self.assertEqual(time_window(T0 + WINDOW_MS - 1), 9_957_320)
        self.assertEqual(time_window(T0 + WINDOW_MS), 9_957_321)

    def test_token_is_unpadded_base64url(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        # 32-byte digest -> 43 chars without padding
        self.assertEqual(len(token), 43)
        self.assertNotIn("=", token)
        self.assertNotIn("+", token)
        self.assertNotIn("/", token)

    def test_known_message(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        self.assertEqual(token, sign(SECRET, "42:p-1:9957320"))

    def test_query_string_and_int_game_id_match(self):
        self.assertEqual(issue_token(SECRET, "42", "p-1", T0), issue_token(SECRET, 42, "p-1", T0))

    def test_valid_in_same_window(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        self.assertTrue(verify_token(SECRET, 42, "p-1", T0 + WINDOW_MS - 1, token))

    def test_valid_in_following_window(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        self.assertTrue(verify_token(SECRET, 42, "p-1", T0 + WINDOW_MS, token))
        self.assertTrue(verify_token(SECRET, 42, "p-1", T0 + 2 * WINDOW_MS - 1, token))

    def test_rejected_two_windows_later(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        self.assertFalse(verify_token(SECRET, 42, "p-1", T0 + 2 * WINDOW_MS, token))

    def test_rejected_from_future_window(self):
        token = issue_token(SECRET, 42, "p-1", T0 + WINDOW_MS)
        self.assertFalse(verify_token(SECRET, 42, "p-1", T0, token))

    def test_rejected_for_other_player_game_or_secret(self):
        token = issue_token(SECRET, 42, "p-1", T0)
        self.assertFalse(verify_token(SECRET, 42, "p-2", T0, token))
        self.assertFalse(verify_token(SECRET, 43, "p-1", T0, token))
        self.assertFalse(verify_token("other-secret", 42, "p-1", T0, token))

    def test_rejects_empty_or_non_ascii(self):
        self.assertFalse(verify_token(SECRET, 42, "p-1", T0, ""))
        self.assertFalse(verify_token(SECRET, 42, "p-1", T0, "ñ" * 43))

    def test_custom_window_width(self):
        token = issue_token(SECRET, 42, "p-1", 0, window_seconds=60)
        self.assertTrue(verify_token(SECRET, 42, "p-1", 119_999, token, window_seconds=60))
        self.assertFalse(verify_token(SECRET, 42, "p-1", 120_000, token, window_seconds=60))


if __name__ == "__main__":
    unittest.main()
