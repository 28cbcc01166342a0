"""Static rewrite tables for punctuation and register conversion.

WHY: Every rewrite the engine performs is a table lookup: connective →
connective + comma, plain ending → polite ending, dictionary verb →
humble/respectful/polite form, casual connective → formal connective.
Keeping the tables as plain data makes them easy to review and extend
without touching the algorithms in punctuation.py and style.py.

HOW: Each table is an ordinary dict. RewriteTable wraps a dict into a
single compiled alternation (longest key first) so a sentence is
rewritten in one left-to-right pass and a replacement is never fed back
into another rule. Patterns are compiled once at import.

RULES:
- Ending tables (plain/polite) only match at sentence end, i.e. before a
  terminator or the end of the string
- Verb and connective tables match anywhere in the sentence
- A rule may carry a negative lookbehind guard so its own output cannot
  match again (e.g. から → ですから)
- Tables are never mutated at runtime
"""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional

# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

# Characters that close a sentence for punctuation purposes (includes closing
# brackets so a caption ending in 」 is not given an extra 。).
CLOSERS = "。．.！!？?」】］"

# Sentence terminators proper.
TERMINATORS = "。．.！!？?"

# Everything that counts as punctuation when deciding where a run ends.
PUNCTUATION = "、" + CLOSERS

OPEN_QUOTES = "「『"
CLOSE_QUOTES = "」』"

CJK_IDEOGRAPH_RE = re.compile(r"[一-鿿]")

# ---------------------------------------------------------------------------
# Punctuation: grammar connectives
# ---------------------------------------------------------------------------

CONJUNCTIONS = (
    "しかし", "けれども", "ところが", "したがって", "そのため", "なお",
    "また", "および", "あるいは", "または", "もしくは",
)
SUBORDINATE_PARTICLES = ("ので", "から", "けど", "が", "のに")
AUXILIARY_PARTICLES = ("では", "には", "からは", "までは")
CONJUNCTIVE_PARTICLES = ("ながら", "つつ", "ものの", "一方", "他方")

_NEXT_CHAR = r"(?=[^{}\s])".format(re.escape(PUNCTUATION))


def _connective_rule(words) -> re.Pattern:
    return re.compile(r"({}){}".format("|".join(words), _NEXT_CHAR))


# Applied in this order; each inserts 、 between the connective and the
# following character.
GRAMMAR_RULES = (
    _connective_rule(CONJUNCTIONS),
    re.compile(r"([」】］]){}".format(_NEXT_CHAR)),
    _connective_rule(SUBORDINATE_PARTICLES),
    _connective_rule(AUXILIARY_PARTICLES),
    _connective_rule(CONJUNCTIVE_PARTICLES),
)

# ---------------------------------------------------------------------------
# Plain / polite endings
# ---------------------------------------------------------------------------

PLAIN_TO_POLITE: Dict[str, str] = {
    "だ": "です",
    "である": "です",
    "だった": "でした",
    "であった": "でした",
    "している": "しています",
    "してる": "しています",
    "してない": "していません",
    "しない": "しません",
    "した": "しました",
    "する": "します",
    "できる": "できます",
    "できた": "できました",
    "わかる": "わかります",
    "わかった": "わかりました",
    "ない": "ありません",
    "なかった": "ありませんでした",
}

POLITE_TO_PLAIN: Dict[str, str] = {
    "です": "だ",
    "でした": "だった",
    "しています": "している",
    "していません": "してない",
    "しません": "しない",
    "しました": "した",
    "します": "する",
    "できます": "できる",
    "できました": "できた",
    "わかります": "わかる",
    "わかりました": "わかった",
    "ありません": "ない",
    "ありませんでした": "なかった",
}

POLITE_STYLE_RE = re.compile(r"です|ます|ました|ません|でした|でしょう|ください|ございます")
PLAIN_STYLE_RE = re.compile(
    r"だ|である|(?:した|する|できる|できた|わかる|わかった|ている|てる|ない|なかった)[{}]*$".format(
        re.escape(TERMINATORS)
    )
)

# ---------------------------------------------------------------------------
# Four-register speech style
# ---------------------------------------------------------------------------

HUMBLE_VERBS: Dict[str, str] = {
    "する": "いたす",
    "やる": "いたす",
    "行く": "まいる",
    "来る": "まいる",
    "言う": "申し上げる",
    "話す": "申し上げる",
    "聞く": "承る",
    "食べる": "いただく",
    "飲む": "いただく",
    "見る": "拝見する",
    "会う": "お目にかかる",
    "知る": "存じる",
    "思う": "存じる",
    "わかる": "存じる",
}

POLITE_VERBS: Dict[str, str] = {
    "する": "します",
    "やる": "やります",
    "行く": "行きます",
    "来る": "来ます",
    "言う": "言います",
    "話す": "話します",
    "聞く": "聞きます",
    "食べる": "食べます",
    "飲む": "飲みます",
    "見る": "見ます",
    "会う": "会います",
    "知る": "知ります",
    "思う": "思います",
    "わかる": "わかります",
}

RESPECTFUL_VERBS: Dict[str, str] = {
    "する": "なさる",
    "やる": "なさる",
    "行く": "いらっしゃる",
    "来る": "いらっしゃる",
    "言う": "おっしゃる",
    "話す": "おっしゃる",
    "聞く": "お聞きになる",
    "食べる": "お召し上がりになる",
    "飲む": "お召し上がりになる",
    "見る": "ご覧になる",
    "会う": "お会いになる",
    "知る": "ご存知です",
    "思う": "お考えになる",
    "わかる": "おわかりになる",
}

CASUAL_VERBS: Dict[str, str] = {
    "します": "する",
    "やります": "やる",
    "行きます": "行く",
    "来ます": "来る",
    "言います": "言う",
    "話します": "話す",
    "聞きます": "聞く",
    "食べます": "食べる",
    "飲みます": "飲む",
    "見ます": "見る",
    "会います": "会う",
    "知ります": "知る",
    "思います": "思う",
    "わかります": "わかる",
}

HUMBLE_MARKERS_RE = re.compile(r"いたし|いたす|まいり|まいる|申し上げ|承り|承る|いただ|拝見|存じ|お目にかか")
RESPECTFUL_MARKERS_RE = re.compile(
    r"なさい|なさる|いらっしゃ|おっしゃ|お[読聞食考会わ]\S{0,3}にな|お召し上がり|ご覧にな|ご存知"
)
POLITE_MARKERS_RE = re.compile(r"です|ます|ございます")

# ---------------------------------------------------------------------------
# Formality connectives
# ---------------------------------------------------------------------------

HIGH_FORMALITY: Dict[str, str] = {
    "けど": "けれども",
    "だけど": "ですけれども",
    "でも": "けれども",
    "から": "ですから",
    "なので": "ですので",
    "じゃ": "では",
    "じゃあ": "それでは",
}

LOW_FORMALITY: Dict[str, str] = {
    "けれども": "けど",
    "ですけれども": "だけど",
    "ですから": "から",
    "ですので": "なので",
    "では": "じゃ",
    "それでは": "じゃあ",
}

# Keys whose replacement contains the key itself need a guard so a second
# pass leaves the already-converted text alone.
HIGH_FORMALITY_GUARDS: Dict[str, str] = {"から": "です"}


# ---------------------------------------------------------------------------
# Compiled tables
# ---------------------------------------------------------------------------


class RewriteTable:
    """A mapping compiled into one longest-first alternation.

    WHY: Applying table entries one after another lets an earlier
    replacement feed a later rule (だった → でした → でしました). A single
    alternation rewrites each position at most once.

    HOW: Keys are sorted by length (longest first) and joined into one
    regex. The match is looked up in the mapping to get its replacement.
    An optional suffix pattern anchors every key (e.g. sentence end) and
    optional per-key guards become negative lookbehinds.
    """

    def __init__(
        self,
        mapping: Mapping[str, str],
        suffix: str = "",
        guards: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.mapping = dict(mapping)
        guards = guards or {}
        alternatives = []
        for key in sorted(self.mapping, key=len, reverse=True):
            guard = guards.get(key)
            prefix = "(?<!{})".format(re.escape(guard)) if guard else ""
            alternatives.append(prefix + re.escape(key))
        self.pattern = re.compile("(?:{}){}".format("|".join(alternatives), suffix))

    def apply(self, text: str) -> str:
        return self.pattern.sub(lambda m: self.mapping[m.group(0)], text)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


_SENTENCE_END = r"(?=[{}]|$)".format(re.escape(TERMINATORS))

ENDING_TABLES: Dict[str, RewriteTable] = {
    # keyed by *target* style
    "polite": RewriteTable(PLAIN_TO_POLITE, suffix=_SENTENCE_END),
    "plain": RewriteTable(POLITE_TO_PLAIN, suffix=_SENTENCE_END),
}

SPEECH_TABLES: Dict[str, RewriteTable] = {
    "humble": RewriteTable(HUMBLE_VERBS),
    "polite": RewriteTable(POLITE_VERBS),
    "respectful": RewriteTable(RESPECTFUL_VERBS),
    "casual": RewriteTable(CASUAL_VERBS),
}

FORMALITY_TABLES: Dict[str, RewriteTable] = {
    "high": RewriteTable(HIGH_FORMALITY, guards=HIGH_FORMALITY_GUARDS),
    "low": RewriteTable(LOW_FORMALITY),
}
