"""Tests for bjsim/engine/cards.py — card values and string helpers."""

from __future__ import annotations

from collections import Counter

import pytest

from bjsim.engine.cards import (
    ACE_VALUE,
    RANK_NAMES,
    Card,
    card_to_str,
    hand_to_str,
    standard_deck,
    str_to_card,
)


class TestCardValue:
    @pytest.mark.parametrize("rank,expected", [('2', 2), ('9', 9), ('10', 10), ('J', 10), ('Q', 10), ('K', 10)])
    def test_single_values(self, rank, expected):
        assert Card(rank, 'H').value == expected

    def test_ace_is_two_valued(self):
        assert Card('A', 'S').value == ACE_VALUE == (1, 11)

    def test_is_ace(self):
        assert Card('A', 'C').is_ace
        assert not Card('K', 'C').is_ace

    def test_absolute_value_ace_is_high(self):
        assert Card('A', 'D').absolute_value() == 11

    def test_absolute_value_face_card(self):
        assert Card('Q', 'D').absolute_value() == 10

    def test_cards_are_hashable_and_equal_by_value(self):
        assert Card('7', 'H') == Card('7', 'H')
        assert len({Card('7', 'H'), Card('7', 'H')}) == 1

    def test_unknown_rank_rejected(self):
        with pytest.raises(ValueError):
            Card('1', 'H')

    def test_unknown_suit_rejected(self):
        with pytest.raises(ValueError):
            Card('5', 'X')


class TestStrings:
    def test_str_to_card_ten(self):
        assert str_to_card('10C') == Card('10', 'C')

    def test_str_to_card_ace(self):
        assert str_to_card('AS') == Card('A', 'S')

    def test_card_to_str(self):
        assert card_to_str(Card('K', 'H')) == 'KH'
        assert str(Card('10', 'D')) == '10D'

    def test_hand_to_str(self):
        assert hand_to_str([Card('A', 'C'), Card('10', 'S')]) == 'AC 10S'

    def test_bad_string_rejected(self):
        with pytest.raises(ValueError):
            str_to_card('ZZ')


class TestStandardDeck:
    def test_single_deck_size(self):
        assert len(standard_deck()) == 52

    def test_single_deck_unique(self):
        assert len(set(standard_deck())) == 52

    def test_multi_deck_rank_counts(self):
        counts = Counter(card.rank for card in standard_deck(4))
        assert set(counts) == set(RANK_NAMES)
        assert all(n == 16 for n in counts.values())

    def test_zero_decks_rejected(self):
        with pytest.raises(ValueError):
            standard_deck(0)
