"""Unit tests for llmprice.extraction.parsers — fragment to tuple."""

import math

import pytest

from llmprice.config.providers import STRATEGIES
from llmprice.extraction.parsers import (
    build_name,
    labelled_price,
    parse_fragment,
    positional_prices,
    to_price,
)


# ============================================================================
# Number helpers
# ============================================================================
class TestToPrice:
    @pytest.mark.parametrize("token,expected", [("2.5", 2.5), ("30.00", 30.0), ("0", 0.0)])
    def test_valid(self, token, expected):
        assert to_price(token) == expected

    @pytest.mark.parametrize("token", ["...", "1.2.3", "", None, "nan", "inf", "-1"])
    def test_invalid(self, token):
        assert to_price(token) is None


class TestPositionalPrices:
    def test_dollar_amounts_win(self):
        assert positional_prices(" 1.5 Pro $3.50 / 1M tokens $7.00") == [3.5, 7.0]

    def test_bare_numbers_fallback(self):
        assert positional_prices("Pro 3.50 7.00") == [3.5, 7.0]

    def test_skips_invalid_tokens(self):
        assert positional_prices("build 1.2.3") == []

    def test_empty(self):
        assert positional_prices("") == []


class TestLabelledPrice:
    def test_reads_number_after_label(self):
        pattern = STRATEGIES["openai"].input_pattern
        assert labelled_price(pattern, "Input: $30.00 / 1M tokens") == 30.0

    def test_no_pattern(self):
        assert labelled_price(None, "Input: $1") is None

    def test_no_label(self):
        pattern = STRATEGIES["openai"].output_pattern
        assert labelled_price(pattern, "Input: $30.00") is None


class TestBuildName:
    def test_optional_group_collapses(self):
        match = STRATEGIES["cohere"].model_pattern.search("Command $1")
        assert build_name("Command {1}", match) == "Command"

    def test_groups(self):
        match = STRATEGIES["mistral"].model_pattern.search("Codestral 22B $0.3")
        assert build_name("{1} {2}", match) == "Codestral 22B"


# ============================================================================
# Provider rules
# ============================================================================
class TestOpenAI:
    strategy = STRATEGIES["openai"]

    def test_labelled_row(self):
        item = parse_fragment(
            "GPT-4 Input: $30.00 / 1M tokens Output: $60.00 / 1M tokens", self.strategy, "table"
        )
        assert (item.name, item.input_price, item.output_price) == ("GPT-4", 30.0, 60.0)
        assert item.source == "table"
        assert not item.output_synthesized

    def test_reasoning_model_name(self):
        item = parse_fragment("o1-mini Input: $3 Output: $12", self.strategy, "heading")
        assert item.name == "o1-mini"

    def test_label_order_does_not_matter(self):
        item = parse_fragment("GPT-4o Output: $10.00 Input: $2.50", self.strategy, "table")
        assert (item.input_price, item.output_price) == (2.5, 10.0)

    def test_input_only_is_not_synthesized(self):
        item = parse_fragment("GPT-4o Input: $2.50", self.strategy, "table")
        assert item.input_price == 2.5
        assert item.output_price is None

    def test_no_prices(self):
        assert parse_fragment("GPT-4o pricing coming soon", self.strategy, "table") is None

    def test_no_model(self):
        assert parse_fragment("Input: $15.00 / 1M tokens", self.strategy, "text-node") is None


class TestAnthropic:
    strategy = STRATEGIES["anthropic"]

    def test_two_prices(self):
        item = parse_fragment("Claude 3.5 Sonnet Input $3 / MTok Output $15 / MTok", self.strategy, "block")
        assert (item.name, item.input_price, item.output_price) == ("Claude 3.5 Sonnet", 3.0, 15.0)

    def test_version_is_not_a_price(self):
        item = parse_fragment("Claude 3 Opus 15 75", self.strategy, "block")
        assert (item.input_price, item.output_price) == (15.0, 75.0)

    def test_needs_two_prices(self):
        assert parse_fragment("Claude 3.5 Haiku Input $0.80 / MTok", self.strategy, "block") is None


class TestGoogle:
    strategy = STRATEGIES["google"]

    def test_synthesizes_output(self):
        item = parse_fragment("Gemini 1.5 Flash $0.35 / 1M tokens", self.strategy, "table")
        assert item.name == "Gemini 1.5 Flash"
        assert item.input_price == 0.35
        assert math.isclose(item.output_price, 1.4)
        assert item.output_synthesized

    def test_ignores_second_price(self):
        item = parse_fragment("Gemini 1.5 Pro $3.50 input $10.50 output", self.strategy, "table")
        assert item.output_price == 14.0
        assert item.output_synthesized


class TestMistral:
    strategy = STRATEGIES["mistral"]

    def test_both_prices(self):
        item = parse_fragment("Mistral Large $2 /M input $6 /M output", self.strategy, "block")
        assert (item.name, item.input_price, item.output_price) == ("Mistral Large", 2.0, 6.0)
        assert not item.output_synthesized

    def test_factor_three(self):
        item = parse_fragment("Codestral 22B $0.3 /M input", self.strategy, "block")
        assert item.output_price == 0.9
        assert item.output_synthesized


class TestCohere:
    strategy = STRATEGIES["cohere"]

    @pytest.mark.parametrize(
        "text,name",
        [
            ("Command R+ $2.50 $10.00", "Command R+"),
            ("Command R $0.15 $0.60", "Command R"),
            ("Command Light $0.30 $0.60", "Command Light"),
            ("Command $1.00 $2.00", "Command"),
        ],
    )
    def test_names(self, text, name):
        assert parse_fragment(text, self.strategy, "block").name == name

    def test_factor_two(self):
        item = parse_fragment("Command R $0.15", self.strategy, "block")
        assert item.output_price == 0.3
        assert item.output_synthesized
