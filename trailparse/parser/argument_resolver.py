"""Argument resolution against the host's context snapshot.

Resolves the tokens that follow a matched verb:

1. Pronouns ("it", "that", ...) to the last referenced entity
2. Directions for travel (short words, then fuzzy against known exits)
3. Entity names against nearby and carried items (exact, prefix, fuzzy)
4. Anything else passes through as a literal

When two candidates score too close to call, resolution stops and a
clarification listing both is returned instead.
"""

import logging
from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

from trailparse.parser.clarification import (
    DIRECTION_PROMPT,
    PRONOUN_CONFIDENCE,
    PRONOUN_PROMPT,
    TIE_CONFIDENCE,
    clamp_score,
    option_intent,
)
from trailparse.parser.intent_types import (
    ENTITY_VERBS,
    ClarifyQuestion,
    CommandDef,
    MissingField,
    ParseContext,
    Verb,
)
from trailparse.parser.normalize import (
    ARTICLES,
    DEFAULT_DIRECTIONS,
    is_pronoun,
    map_direction,
    normalize,
)
from trailparse.parser.registry import levenshtein_limit

logger = logging.getLogger(__name__)


BASE_ARGS_SCORE = 0.9
PRONOUN_PENALTY = 0.08
LITERAL_PENALTY = 0.02
POOL_BOOST = 0.08
MAPPED_DIRECTION_SCORE = 0.98
TIE_MARGIN = 0.05
TIE_FLOOR = 0.6
JOIN_THRESHOLD = 0.9

# Verbs whose inventory items get the carried-item boost
INVENTORY_BOOST_VERBS = frozenset(
    v.value for v in (Verb.DROP, Verb.USE, Verb.EAT, Verb.DRINK)
)


@dataclass(frozen=True)
class EntityMatch:
    """Result of matching a token against a candidate pool.

    Attributes:
        values: Best value, or the top two when tied. Empty if nothing matched.
        score: Score of the best value.
        tie: Whether the top two are too close to choose between.
    """

    values: list[str] = field(default_factory=list)
    score: float = 0.0
    tie: bool = False

    @property
    def best(self) -> str | None:
        return self.values[0] if self.values else None


@dataclass(frozen=True)
class ArgumentResolution:
    """Resolved arguments, or the clarification that stopped resolution.

    Attributes:
        args: Resolved argument strings.
        clarify: Clarification to ask instead, if resolution was ambiguous.
        score: Argument-resolution score (the clarification's confidence
            when clarify is set).
    """

    args: list[str] = field(default_factory=list)
    clarify: ClarifyQuestion | None = None
    score: float = BASE_ARGS_SCORE


def _candidate_score(token: str, candidate: str) -> float | None:
    """Score one candidate: exact, prefix, then edit-distance band."""
    if token == candidate:
        return 1.0
    if len(token) >= 2 and candidate.startswith(token):
        return 0.9
    distance = Levenshtein.distance(token, candidate)
    if distance > levenshtein_limit(len(candidate)):
        return None
    return 0.72 - 0.08 * distance


def best_matches(
    token: str,
    candidates: list[str],
    nearby_boost: list[str] | None = None,
    inventory_boost: list[str] | None = None,
) -> EntityMatch:
    """Score a token against candidates and pick the best.

    Membership in either boost pool adds 0.08, independently.

    Args:
        token: Normalized text to resolve.
        candidates: Normalized, de-duplicated candidate values.
        nearby_boost: Values in reach.
        inventory_boost: Values carried.

    Returns:
        EntityMatch with one value, two tied values, or none.
    """
    if not candidates:
        return EntityMatch()

    near = set(nearby_boost or ())
    carried = set(inventory_boost or ())
    scored: list[tuple[str, float]] = []
    for candidate in candidates:
        score = _candidate_score(token, candidate)
        if score is None:
            continue
        if candidate in near:
            score += POOL_BOOST
        if candidate in carried:
            score += POOL_BOOST
        scored.append((candidate, clamp_score(score)))

    if not scored:
        return EntityMatch()

    scored.sort(key=lambda item: (-item[1], item[0]))
    best_value, best_score = scored[0]
    if (
        len(scored) > 1
        and best_score - scored[1][1] < TIE_MARGIN
        and scored[1][1] > TIE_FLOOR
    ):
        return EntityMatch(values=[best_value, scored[1][0]], score=best_score, tie=True)
    return EntityMatch(values=[best_value], score=best_score)


def merge_unique(*pools: tuple[str, ...] | list[str]) -> list[str]:
    """Normalize and de-duplicate names, keeping first-seen order."""
    seen: set[str] = set()
    merged: list[str] = []
    for pool in pools:
        for value in pool:
            n = normalize(value)
            if n and n not in seen:
                seen.add(n)
                merged.append(n)
    return merged


def resolve_direction(token: str, known: tuple[str, ...] | list[str] = ()) -> EntityMatch:
    """Resolve a direction word, fuzzily against the known directions."""
    n = normalize(token)
    if mapped := map_direction(n):
        return EntityMatch(values=[mapped], score=MAPPED_DIRECTION_SCORE)
    pool = merge_unique(known) or list(DEFAULT_DIRECTIONS)
    return best_matches(n, pool)


def resolve_entity(token: str, context: ParseContext, verb: str) -> EntityMatch:
    """Resolve an entity name against nearby and carried items."""
    n = normalize(token)
    if not n:
        return EntityMatch()
    near = merge_unique(context.nearby)
    carried = merge_unique(context.inventory)
    return best_matches(
        n,
        merge_unique(near, carried),
        nearby_boost=near,
        inventory_boost=carried if verb in INVENTORY_BOOST_VERBS else None,
    )


def expects_entity(verb: str, position: int) -> bool:
    """Whether the argument at this position names an entity.

    Only the first argument does, except for "use" ("use flint on tinder").
    """
    if position > 0 and verb != Verb.USE.value:
        return False
    return verb in ENTITY_VERBS


class ArgumentResolver:
    """Resolves argument tokens for a matched command.

    Usage:
        resolver = ArgumentResolver()
        result = resolver.resolve(context, command, ["stic"])
        if result.clarify:
            ...ask the player...
        else:
            args = result.args
    """

    def resolve(
        self, context: ParseContext, command: CommandDef, tokens: list[str]
    ) -> ArgumentResolution:
        """Resolve argument tokens left after the verb.

        Args:
            context: Host-supplied snapshot.
            command: The matched command.
            tokens: Argument tokens (quantity/movement already removed).

        Returns:
            ArgumentResolution with args and score, or a clarification.
        """
        if not tokens:
            return ArgumentResolution()

        verb = command.canonical
        resolved: list[str] = []
        score = BASE_ARGS_SCORE
        i = 0
        while i < len(tokens):
            token = tokens[i]

            if is_pronoun(token):
                referent = normalize(context.last_entity)
                if not referent:
                    logger.debug(f"Pronoun {token!r} with no last entity")
                    return ArgumentResolution(
                        clarify=ClarifyQuestion(
                            prompt=PRONOUN_PROMPT, expects=MissingField.REFERENT
                        ),
                        args=resolved,
                        score=PRONOUN_CONFIDENCE,
                    )
                resolved.append(referent)
                score -= PRONOUN_PENALTY
                i += 1
                continue

            position = len(resolved)
            if verb == Verb.GO.value and position == 0:
                match = resolve_direction(token, context.known_directions)
                if match.tie:
                    return ArgumentResolution(
                        clarify=ClarifyQuestion(
                            prompt=DIRECTION_PROMPT,
                            options=tuple(
                                option_intent(verb, [value], match.score - idx * 0.01)
                                for idx, value in enumerate(match.values[:2])
                            ),
                            expects=MissingField.DIRECTION,
                        ),
                        args=resolved,
                        score=TIE_CONFIDENCE,
                    )
                if match.best:
                    resolved.append(match.best)
                    score = min(score, match.score)
                    i += 1
                    continue

            if expects_entity(verb, position):
                if token in ARTICLES and i + 1 < len(tokens):
                    i += 1
                    continue
                phrase = token
                span = 1
                if i + 1 < len(tokens):
                    pair = f"{token} {tokens[i + 1]}"
                    if resolve_entity(pair, context, verb).score > JOIN_THRESHOLD:
                        phrase = pair
                        span = 2
                match = resolve_entity(phrase, context, verb)
                if match.tie:
                    logger.debug(f"Entity tie for {phrase!r}: {match.values}")
                    return ArgumentResolution(
                        clarify=ClarifyQuestion(
                            prompt=f"Did you mean {verb}?",
                            options=tuple(
                                option_intent(verb, [value], match.score - idx * 0.01)
                                for idx, value in enumerate(match.values[:2])
                            ),
                            expects=MissingField.SELECTION,
                        ),
                        args=resolved,
                        score=TIE_CONFIDENCE,
                    )
                if match.best:
                    resolved.append(match.best)
                    score = min(score, match.score)
                    i += span
                    continue

            resolved.append(token)
            score -= LITERAL_PENALTY
            i += 1

        return ArgumentResolution(args=resolved, score=clamp_score(score))
