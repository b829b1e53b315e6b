"""
Test cases for gesture and sign classification with synthetic hands.
"""
import unittest
import sys
from pathlib import Path
from unittest import mock

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsign.gestures import (
    BASE_RULES, SIGN_RULES, GestureRule,
    BaseGestureClassifier, SignClassifier, classify_observation,
)
from tests.hands import (
    collapsed_hand, fist, letter_i_hand, love_hand, open_hand, pinch_hand, pointing_hand, tiny_hand,
)


class TestBaseGestureClassifier(unittest.TestCase):
    """Test open / closed / pinch / point classification."""

    def setUp(self):
        """Set up classifier."""
        self.classifier = BaseGestureClassifier()

    def test_rule_order(self):
        """Rules are evaluated open, closed, pinch, point."""
        self.assertEqual([rule.type for rule in BASE_RULES], ["open", "closed", "pinch", "point"])

    def test_open_hand(self):
        """Uniformly extended fingers give 'open' with the maximum open confidence."""
        result = self.classifier.classify(open_hand())
        self.assertEqual(result.type, "open")
        self.assertGreater(result.confidence, 0.72)
        self.assertAlmostEqual(result.confidence, 0.92, places=6)
        self.assertEqual(len(result.landmarks), 21)

    def test_fist(self):
        """All tips within 0.45 hand sizes give 'closed'."""
        result = self.classifier.classify(fist())
        self.assertEqual(result.type, "closed")
        # 0.95 - 0.35 * 0.5
        self.assertAlmostEqual(result.confidence, 0.775, places=6)

    def test_pinch(self):
        """Touching thumb and index with other fingers out give 'pinch'."""
        result = self.classifier.classify(pinch_hand())
        self.assertEqual(result.type, "pinch")
        # 1 - 0.005 / (0.4 * 0.25)
        self.assertAlmostEqual(result.confidence, 0.95, places=6)

    def test_point(self):
        """Index alone extended gives 'point' capped at 0.95."""
        result = self.classifier.classify(pointing_hand())
        self.assertEqual(result.type, "point")
        self.assertAlmostEqual(result.confidence, 0.95, places=6)

    def test_no_rule_is_unknown(self):
        """A hand matching no rule is 'unknown' with zero confidence."""
        result = self.classifier.classify(letter_i_hand())
        self.assertEqual(result.type, "unknown")
        self.assertEqual(result.confidence, 0.0)
        self.assertFalse(result.is_match)

    def test_low_confidence_match_is_unknown(self):
        """A matching rule below the 0.72 floor doesn't fall through to later rules."""
        weak_open = GestureRule("open", lambda f: True, lambda f: 0.5)
        always_closed = GestureRule("closed", lambda f: True, lambda f: 0.9)
        classifier = BaseGestureClassifier(rules=[weak_open, always_closed])

        result = classifier.classify(open_hand())
        self.assertEqual(result.type, "unknown")
        self.assertEqual(result.confidence, 0.0)

    def test_confidence_capped(self):
        """Rule confidences above 0.99 are clamped."""
        eager = GestureRule("open", lambda f: True, lambda f: 1.4)
        result = BaseGestureClassifier(rules=[eager]).classify(open_hand())
        self.assertEqual(result.confidence, 0.99)

    def test_small_hand_is_unknown(self):
        result = self.classifier.classify(tiny_hand())
        self.assertEqual(result.type, "unknown")

    def test_collapsed_hand_is_unknown(self):
        """Fingertips on the wrist skip the rule table entirely."""
        always_open = GestureRule("open", lambda f: True, lambda f: 0.9)
        result = BaseGestureClassifier(rules=[always_open]).classify(collapsed_hand())
        self.assertEqual(result.type, "unknown")
        self.assertEqual(result.confidence, 0.0)


class TestSignClassifier(unittest.TestCase):
    """Test I / LOVE / YOU sign detection."""

    def setUp(self):
        """Set up classifier."""
        self.classifier = SignClassifier()

    def test_rule_order(self):
        """Signs are checked letter_i, love, you."""
        self.assertEqual([rule.type for rule in SIGN_RULES], ["letter_i", "love", "you"])

    def test_letter_i(self):
        """Pinky up with other fingers folded is the letter I."""
        result = self.classifier.classify(letter_i_hand())
        self.assertEqual(result.type, "letter_i")
        self.assertEqual(result.message, "I")
        # mean(1.0, 1 - (0.0707 + 0.06 + 0.0707) / 1.2)
        self.assertAlmostEqual(result.confidence, 0.91607, places=4)

    def test_love(self):
        """Bunched fingertips with a low, centered wrist is LOVE."""
        result = self.classifier.classify(love_hand(score=0.9))
        self.assertEqual(result.type, "love")
        self.assertEqual(result.message, "LOVE")
        # mean(1.0, 1 - 0.0595, 0.9)
        self.assertAlmostEqual(result.confidence, 0.94683, places=4)

    def test_love_needs_model_confidence(self):
        """A weak detection score drags LOVE under its 0.68 floor."""
        result = self.classifier.classify(love_hand(score=0.0))
        self.assertEqual(result.type, "none")
        self.assertEqual(result.confidence, 0.0)

    def test_you(self):
        """Index forward with everything else folded is YOU."""
        result = self.classifier.classify(pointing_hand())
        self.assertEqual(result.type, "you")
        self.assertEqual(result.message, "YOU")
        # mean(1.0, 1 - 0.36015 / 1.6)
        self.assertAlmostEqual(result.confidence, 0.88745, places=4)

    def test_general_gestures_are_not_signs(self):
        """Open hands, fists and pinches match no sign."""
        for hand in (open_hand(), fist(), pinch_hand()):
            self.assertEqual(self.classifier.classify(hand).type, "none")

    def test_small_hand_abstains(self):
        """Hand size below 0.05 returns no result whatever the rest of the hand does."""
        result = self.classifier.classify(tiny_hand())
        self.assertEqual(result.type, "none")
        self.assertFalse(result.is_match)

    def test_collapsed_hand_still_checked(self):
        """Collapsed fingertips don't silence the sign rules."""
        always_love = GestureRule("love", lambda f: True, lambda f: 0.9, "LOVE", 0.68)
        result = SignClassifier(rules=[always_love]).classify(collapsed_hand())
        self.assertEqual(result.type, "love")

    def test_unaccepted_sign_falls_through(self):
        """A matching sign below its floor lets later signs be checked."""
        weak_i = GestureRule("letter_i", lambda f: True, lambda f: 0.5, "I", 0.78)
        classifier = SignClassifier(rules=[weak_i, SIGN_RULES[2]])

        result = classifier.classify(pointing_hand())
        self.assertEqual(result.type, "you")


class TestClassifyObservation(unittest.TestCase):
    """Test sign-first precedence."""

    def setUp(self):
        """Set up classifiers."""
        self.sign = SignClassifier()
        self.base = BaseGestureClassifier()

    def test_sign_takes_precedence(self):
        """A hand that is both 'you' and 'point' is reported as 'you'."""
        self.assertEqual(self.base.classify(pointing_hand()).type, "point")

        with mock.patch.object(self.base, "classify_features") as base_features:
            result = classify_observation(pointing_hand(), self.sign, self.base)

        self.assertEqual(result.type, "you")
        base_features.assert_not_called()

    def test_falls_back_to_base(self):
        """Without a sign the base classifier decides."""
        result = classify_observation(open_hand(), self.sign, self.base)
        self.assertEqual(result.type, "open")

    def test_sign_below_caller_threshold(self):
        """A sign must exceed the caller's threshold to be authoritative."""
        result = classify_observation(letter_i_hand(), self.sign, self.base, sign_min_confidence=0.95)
        self.assertEqual(result.type, "unknown")

    def test_degenerate_hand(self):
        result = classify_observation(tiny_hand(), self.sign, self.base)
        self.assertEqual(result.type, "unknown")
        self.assertEqual(result.confidence, 0.0)


if __name__ == '__main__':
    unittest.main()
