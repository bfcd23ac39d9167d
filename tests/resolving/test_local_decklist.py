"""
Unit tests for local decklist parsing and card lookups.
"""

import pytest
import requests

from deck_printer.core.models import Card
from deck_printer.fetching import FetchConfig
from deck_printer.resolving import DeckLookupError, DecklistParseError, SourceError, parse_decklist
from deck_printer.resolving.local import DecklistEntry, entry_cards, load_local_deck, lookup_card


HYDRA = {
    "name": "Whiptongue Hydra",
    "id": "hydra-id",
    "all_parts": [
        {"name": "Whiptongue Hydra", "component": "combo_piece", "id": "hydra-id"},
        {"name": "Hydra Token", "component": "token", "id": "token-id"},
    ],
}
OPT = {"name": "Opt", "id": "opt-id"}


class TestParseDecklist:

    def test_parses_entries_in_order(self):
        entries = parse_decklist("1 Whiptongue Hydra (NEC) 134\n4 Opt (XLN) 65\n")

        assert entries == [
            DecklistEntry(1, "Whiptongue Hydra", "nec", "134", 1),
            DecklistEntry(4, "Opt", "xln", "65", 2),
        ]

    def test_skips_blank_and_comment_lines(self):
        text = "# commander\n\n// main\n2x Opt (XLN) 65\n"

        entries = parse_decklist(text)

        assert len(entries) == 1
        assert entries[0].quantity == 2
        assert entries[0].line_number == 4

    def test_set_codes_with_digits_and_names_with_parentheses(self):
        entries = parse_decklist("1 Borrowing 100,000 Arrows (M21) 2\n1 Who (What) When (UNF) 5a\n")

        assert entries[0].set_code == "m21"
        assert entries[1].name == "Who (What) When"
        assert entries[1].collector_number == "5a"

    @pytest.mark.parametrize("line", ["Opt (XLN) 65", "1 Opt XLN 65", "1 Opt (XLN)", "0 Opt (XLN) 65"])
    def test_malformed_line_raises_with_line_number(self, line):
        with pytest.raises(DecklistParseError) as exc_info:
            parse_decklist(f"1 Opt (XLN) 65\n{line}\n")

        assert exc_info.value.line_number == 2


class TestEntryCards:

    def test_tokens_follow_each_copy(self):
        entry = DecklistEntry(2, "Whiptongue Hydra", "nec", "134", 1)

        cards, tokens = entry_cards(entry, HYDRA)

        assert cards == [Card("Whiptongue Hydra", "hydra-id")] * 2
        assert tokens == [Card("Hydra Token", "token-id")] * 2

    def test_card_without_related_parts(self):
        cards, tokens = entry_cards(DecklistEntry(1, "Opt", "xln", "65", 1), OPT)

        assert cards == [Card("Opt", "opt-id")]
        assert tokens == []


class TestLookup:

    def test_lookup_request_shape(self, make_session, make_response, sleeps):
        session = make_session(lambda url, params: make_response(200, json_data=OPT))
        entry = DecklistEntry(1, "Opt", "xln", "65", 3)

        record = lookup_card(session, entry, FetchConfig(), sleep=sleeps.append)

        call = session.calls[0]
        assert record == OPT
        assert call["url"] == "https://api.scryfall.com/cards/named"
        assert call["params"] == {"exact": "Opt", "set": "xln", "collector_number": "65"}
        assert call["headers"]["Accept"] == "application/json"

    def test_missing_card_raises_lookup_error(self, make_session, make_response, sleeps):
        session = make_session(lambda url, params: make_response(404))
        entry = DecklistEntry(1, "Nope", "xln", "999", 7)

        with pytest.raises(DeckLookupError, match="Line 7"):
            lookup_card(session, entry, FetchConfig(), sleep=sleeps.append)

    def test_non_json_body_fails_without_retry(self, make_session, make_response, sleeps):
        bad_json = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        session = make_session(lambda url, params: make_response(200, json_data=bad_json))

        with pytest.raises(DeckLookupError, match="not valid JSON"):
            lookup_card(session, DecklistEntry(1, "Opt", "xln", "65", 1), FetchConfig(), sleep=sleeps.append)

        assert len(session.calls) == 1
        assert sleeps == []

    def test_malformed_record_raises(self, make_session, make_response, sleeps):
        session = make_session(lambda url, params: make_response(200, json_data={"object": "error"}))

        with pytest.raises(DeckLookupError, match="unexpected card record"):
            lookup_card(session, DecklistEntry(1, "Opt", "xln", "65", 1), FetchConfig(), sleep=sleeps.append)


class TestLoadLocalDeck:

    def test_builds_deck_in_file_order(self, tmp_path, make_session, make_response, sleeps):
        decklist = tmp_path / "elves.txt"
        decklist.write_text("1 Whiptongue Hydra (NEC) 134\n2 Opt (XLN) 65\n")
        records = {"Whiptongue Hydra": HYDRA, "Opt": OPT}
        session = make_session(
            lambda url, params: make_response(200, json_data=records[params["exact"]])
        )

        deck = load_local_deck(decklist, session, workers=4, sleep=sleeps.append)

        assert deck.name == "elves"
        assert [c.asset_id for c in deck.cards] == ["hydra-id", "opt-id", "opt-id"]
        assert [c.asset_id for c in deck.tokens] == ["token-id"]
        assert len(session.calls) == 2

    def test_unreadable_file_raises_source_error(self, tmp_path, make_session):
        session = make_session(lambda url, params: pytest.fail("network used"))

        with pytest.raises(SourceError):
            load_local_deck(tmp_path / "missing.txt", session)

    def test_empty_decklist_gives_empty_deck(self, tmp_path, make_session):
        decklist = tmp_path / "empty.txt"
        decklist.write_text("\n# nothing\n")

        deck = load_local_deck(decklist, make_session(lambda url, params: pytest.fail("network used")))

        assert deck.total_cards == 0
