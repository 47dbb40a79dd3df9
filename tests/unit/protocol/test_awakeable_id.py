import pytest

from resumable.protocol.session import AWAKEABLE_ID_PREFIX, AwakeableIdentifier


class TestAwakeableIdentifier:
    def test_format(self):
        awakeable_id = str(AwakeableIdentifier(b"\x00\x01", 2))

        # base64url(00 01 00 00 00 02) without padding
        assert awakeable_id == f"{AWAKEABLE_ID_PREFIX}AAEAAAAC"

    def test_parse_reverses_format(self):
        original = AwakeableIdentifier(b"some-invocation", 42)

        parsed = AwakeableIdentifier.parse(str(original))

        assert parsed == original
        assert parsed.entry_index == 42

    @pytest.mark.parametrize(
        "awakeable_id",
        [
            "",
            "AAEAAAAC",
            "prom_2AAEAAAAC",
            "prom_1",
            "prom_1AAA",
            "prom_1!!!!",
        ],
    )
    def test_malformed_ids_rejected(self, awakeable_id: str):
        with pytest.raises(ValueError):
            AwakeableIdentifier.parse(awakeable_id)
