import json
import unittest

from server.commands import (
    CommandMessageError,
    CommandRequest,
    make_command_message,
    parse_command_message,
)


class ParseCommandMessageTests(unittest.TestCase):
    def test_parses_command_and_extra_payload(self) -> None:
        request = parse_command_message(
            json.dumps(
                {
                    "type": "command",
                    "command": "save_settings",
                    "settings": {"work_minutes": 30},
                }
            )
        )

        self.assertEqual(
            CommandRequest(name="save_settings", payload={"settings": {"work_minutes": 30}}),
            request,
        )

    def test_accepts_utf8_bytes(self) -> None:
        request = parse_command_message(b'{"type": "command", "command": "start"}')
        self.assertEqual("start", request.name)
        self.assertEqual({}, request.payload)

    def test_rejects_malformed_messages(self) -> None:
        cases = {
            "not json": "{oops",
            "not an object": "[1, 2]",
            "wrong type": '{"type": "chat", "command": "start"}',
            "unknown command": '{"type": "command", "command": "snooze"}',
            "missing command": '{"type": "command"}',
            "bad bytes": b"\xff\xfe",
        }
        for label, raw in cases.items():
            with self.subTest(case=label):
                with self.assertRaises(CommandMessageError):
                    parse_command_message(raw)

    def test_make_command_message_is_parseable(self) -> None:
        raw = make_command_message("open_settings")
        self.assertEqual("open_settings", parse_command_message(raw).name)


if __name__ == "__main__":
    unittest.main()
