"""Tests for hand valuation and hand snapshots."""

import pytest
from hypothesis import given

from blackjack_engine.cards import Card, Rank, Suit
from blackjack_engine.hand import Hand, HandResult, calculate_hand_value
from blackjack_engine.outcome import Outcome
from conftest import cards, hand_cards_strategy


class TestCalculateHandValue:
    """Tests for calculate_hand_value."""

    def test_empty_hand(self):
        """Test empty hand values to zero."""
        assert calculate_hand_value([]) == HandResult(
            value=0, is_soft=False, is_busted=False, is_blackjack=False
        )

    def test_hard_12(self):
        """Test 5-7 is a hard 12."""
        result = calculate_hand_value(cards("5S", "7H"))
        assert result.value == 12
        assert not result.is_soft
        assert not result.is_busted

    def test_two_faces(self):
        """Test K-Q is 20."""
        assert calculate_hand_value(cards("KS", "QH")).value == 20

    def test_soft_18(self):
        """Test A-7 is a soft 18."""
        result = calculate_hand_value(cards("AS", "7H"))
        assert result.value == 18
        assert result.is_soft

    def test_soft_to_hard(self):
        """Test A-7-8 counts the ace as 1."""
        result = calculate_hand_value(cards("AS", "7H", "8D"))
        assert result.value == 16
        assert not result.is_soft

    def test_blackjack(self):
        """Test A-K is blackjack."""
        result = calculate_hand_value(cards("AS", "KH"))
        assert result.value == 21
        assert result.is_blackjack
        assert result.is_soft

    def test_three_card_21_not_blackjack(self):
        """Test that 21 with 3+ cards is not blackjack."""
        result = calculate_hand_value(cards("7S", "7H", "7C"))
        assert result.value == 21
        assert not result.is_blackjack

    def test_bust(self):
        """Test K-Q-5 busts."""
        result = calculate_hand_value(cards("KS", "QH", "5C"))
        assert result.value == 25
        assert result.is_busted
        assert not result.is_soft

    def test_face_down_card_excluded(self):
        """Test a face-down ace is not counted."""
        hand = (Card(Rank.ACE, Suit.SPADES, face_down=True), Card(Rank.KING, Suit.HEARTS))
        result = calculate_hand_value(hand)
        assert result.value == 10
        assert not result.is_soft
        assert not result.is_blackjack

    def test_all_face_down(self):
        """Test a fully hidden hand values to zero."""
        hand = (Card(Rank.ACE, Suit.SPADES, face_down=True), Card(Rank.KING, Suit.HEARTS, face_down=True))
        result = calculate_hand_value(hand)
        assert result.value == 0
        assert not result.is_blackjack
        assert not result.is_busted

    def test_multiple_aces(self):
        """Test A-A-9 reduces one ace and stays soft."""
        result = calculate_hand_value(cards("AS", "AH", "9C"))
        assert result.value == 21
        assert result.is_soft
        assert not result.is_blackjack

    def test_pair_of_aces(self):
        """Test A-A is a soft 12."""
        result = calculate_hand_value(cards("AS", "AH"))
        assert result.value == 12
        assert result.is_soft

    def test_four_aces(self):
        """Test every ace can drop to 1."""
        result = calculate_hand_value(cards("AS", "AH", "AD", "AC", "KS", "9H"))
        assert result.value == 23
        assert result.is_busted
        assert not result.is_soft

    def test_accepts_generator(self):
        """Test any iterable of cards can be valued."""
        assert calculate_hand_value(c for c in cards("9S", "9H")).value == 18

    def test_repeatable(self):
        """Test evaluating the same cards twice gives the same result."""
        hand = cards("AS", "6H", "KD")
        assert calculate_hand_value(hand) == calculate_hand_value(hand)

    @given(hand_cards_strategy())
    def test_valuation_invariants(self, hand):
        """Test soft, bust and blackjack flags agree with the value."""
        result = calculate_hand_value(hand)
        assert result.is_busted == (result.value > 21)
        if result.is_soft:
            assert result.value <= 21
            assert any(card.is_ace for card in hand)
        if result.is_blackjack:
            assert len(hand) == 2
            assert result.value == 21
        assert result == calculate_hand_value(hand)

    @given(hand_cards_strategy())
    def test_value_bounds(self, hand):
        """Test value lies between the all-aces-as-one total and the nominal total."""
        hard_total = sum(1 if card.is_ace else card.value for card in hand)
        nominal_total = sum(card.value for card in hand)
        assert hard_total <= calculate_hand_value(hand).value <= nominal_total


class TestHand:
    """Tests for the Hand snapshot."""

    def test_empty_hand(self):
        """Test empty hand properties."""
        hand = Hand()
        assert len(hand) == 0
        assert hand.value == 0
        assert not hand.is_soft
        assert not hand.is_blackjack
        assert not hand.is_busted

    def test_with_card_returns_new_hand(self, hard_16_hand):
        """Test adding a card leaves the original alone."""
        bigger = hard_16_hand.with_card(Card(Rank.FIVE, Suit.CLUBS))
        assert len(hard_16_hand) == 2
        assert len(bigger) == 3
        assert bigger.value == 21

    def test_insertion_order_preserved(self):
        """Test cards keep the order they were dealt."""
        hand = Hand().with_card(Card(Rank.TWO, Suit.CLUBS)).with_card(Card(Rank.ACE, Suit.SPADES))
        assert [card.rank for card in hand] == [Rank.TWO, Rank.ACE]
        assert hand[1].is_ace

    def test_hand_properties(self, soft_17_hand, bust_hand):
        """Test derived properties delegate to valuation."""
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft
        assert bust_hand.is_busted
        assert bust_hand.value == 26

    def test_natural(self, blackjack_hand):
        """Test a two-card 21 is a natural only when not from a split."""
        assert blackjack_hand.is_natural
        split_21 = Hand(cards=blackjack_hand.cards, is_from_split=True)
        assert split_21.is_blackjack
        assert not split_21.is_natural

    def test_is_pair(self, pair_8s_hand):
        """Test pair detection."""
        assert pair_8s_hand.is_pair
        assert not Hand(cards=cards("KS", "QH")).is_pair

    def test_doubled(self):
        """Test doubling doubles the bet and adds one card."""
        hand = Hand(cards=cards("5S", "6H"), bet=50).doubled(Card(Rank.TEN, Suit.CLUBS))
        assert hand.bet == 100
        assert hand.is_doubled
        assert hand.value == 21

    def test_split(self, pair_8s_hand):
        """Test splitting makes two one-card hands with the same bet."""
        first, second = pair_8s_hand.split()
        assert len(first) == len(second) == 1
        assert first.bet == second.bet == 100
        assert first.is_from_split and second.is_from_split
        assert not first.is_split_aces

    def test_split_aces(self):
        """Test splitting aces marks both hands."""
        first, second = Hand(cards=cards("AS", "AH")).split()
        assert first.is_split_aces and second.is_split_aces

    def test_split_requires_two_cards(self, bust_hand):
        """Test only a two-card hand can be split."""
        with pytest.raises(ValueError):
            bust_hand.split()

    def test_revealed(self):
        """Test revealing turns every card face up."""
        hand = Hand(cards=(Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS, face_down=True)))
        assert hand.value == 11
        assert hand.revealed().value == 21

    def test_resolved_hand_is_terminal(self, hard_16_hand):
        """Test a resolved hand cannot change."""
        resolved = hard_16_hand.resolved(Outcome.LOSE)
        assert resolved.result == Outcome.LOSE
        assert resolved.is_resolved
        with pytest.raises(ValueError):
            resolved.with_card(Card(Rank.TWO, Suit.CLUBS))
        with pytest.raises(ValueError):
            resolved.resolved(Outcome.WIN)

    def test_hand_is_immutable(self, hard_16_hand):
        """Test hand fields cannot be reassigned."""
        with pytest.raises(AttributeError):
            hard_16_hand.bet = 10

    def test_str(self, blackjack_hand, soft_17_hand, bust_hand):
        """Test string representation."""
        assert "BLACKJACK" in str(blackjack_hand)
        assert "soft 17" in str(soft_17_hand)
        assert "BUST" in str(bust_hand)
