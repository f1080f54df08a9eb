"""Intent types and dataclasses for the command parser.

This module defines the verbs the game recognizes and the immutable
data structures that describe a parsed player intent.
"""

from dataclasses import dataclass, field
from enum import Enum


class IntentKind(str, Enum):
    """What sort of request a parsed input represents."""

    COMMAND = "command"  # Changes game state
    QUERY = "query"  # Reads game state (look, inventory)
    HELP = "help"  # Asks for help text
    UNKNOWN = "unknown"  # Could not be mapped


class Verb(str, Enum):
    """Canonical verbs of the built-in command table.

    Hosts may register extra commands under other canonical names; those
    are carried as plain strings on the Intent.
    """

    # Meta
    HELP = "help"
    INVENTORY = "inventory"
    LOOK = "look"
    INSPECT = "inspect"
    ACTIONS = "actions"

    # Items
    TAKE = "take"
    DROP = "drop"
    USE = "use"
    CRAFT = "craft"

    # Needs
    EAT = "eat"
    DRINK = "drink"
    SLEEP = "sleep"

    # Movement
    GO = "go"

    # Run control
    NEXT = "next"
    SAVE = "save"
    LOAD = "load"
    MENU = "menu"

    # Survival
    HUNT = "hunt"
    FISH = "fish"
    FORAGE = "forage"
    WOOD = "wood"
    RESOURCES = "resources"
    COLLECT = "collect"
    FIRE = "fire"
    SHELTER = "shelter"
    TRAP = "trap"
    GUT = "gut"
    COOK = "cook"
    PRESERVE = "preserve"
    BARK = "bark"
    PLANTS = "plants"


# Verbs whose first argument names an entity in reach
ENTITY_VERBS: frozenset[str] = frozenset(
    v.value
    for v in (Verb.TAKE, Verb.DROP, Verb.USE, Verb.INSPECT, Verb.CRAFT, Verb.EAT, Verb.DRINK)
)

# Verbs that prompt with live context when the target is missing
INTERACTIVE_TARGET_VERBS: frozenset[str] = frozenset(
    v.value for v in (Verb.TAKE, Verb.DROP, Verb.USE, Verb.INSPECT)
)


def command_kind(verb: str) -> IntentKind:
    """Classify a canonical verb."""
    if verb == Verb.HELP.value:
        return IntentKind.HELP
    if verb in (Verb.LOOK.value, Verb.INSPECT.value, Verb.INVENTORY.value):
        return IntentKind.QUERY
    return IntentKind.COMMAND


class MovementCondition(str, Enum):
    """Open-ended stopping condition for travel."""

    NONE = "none"
    DARK = "dark"  # "until dark"
    TIRED = "tired"  # "until exhausted"


class MissingField(str, Enum):
    """Kinds of answer a clarification is waiting for."""

    DIRECTION = "direction"
    DISTANCE = "distance"  # Distance or duration of travel
    UNIT = "unit"  # Unit for a bare number ("go 5")
    SELECTION = "selection"  # Pick one of the offered options
    ENTITY = "entity"
    ARGUMENT = "argument"
    REFERENT = "referent"  # What a pronoun refers to
    CONFIRM = "confirm"  # Yes/no risk confirmation
    CLARIFICATION = "clarification"  # Free text rephrase


@dataclass(frozen=True)
class Quantity:
    """A quantity token pulled out of the arguments.

    Attributes:
        raw: The token as typed (normalized).
        n: Count. -1 means "all", 0 means "some".
        unit: One of count, hours, minutes, all, some.
    """

    raw: str
    n: int
    unit: str


@dataclass(frozen=True)
class MovementScale:
    """How far or how long a movement should go.

    Attributes:
        raw: Normalized phrase the scale was read from ("2 km", "until dark").
        distance_meters: Distance in meters, 0 when not given.
        duration_minutes: Duration in minutes, 0 when not given.
        tiles: Tile count when the distance was given in tiles.
        condition: Open-ended stopping condition.
    """

    raw: str = ""
    distance_meters: float = 0.0
    duration_minutes: int = 0
    tiles: int | None = None
    condition: MovementCondition = MovementCondition.NONE

    @property
    def is_open_ended(self) -> bool:
        """Whether travel stops on a condition rather than a number."""
        return self.condition != MovementCondition.NONE


@dataclass(frozen=True)
class ClarifyQuestion:
    """A question the host should put to the player.

    Attributes:
        prompt: Text to show.
        options: Ranked candidate intents (at most four). Empty means a
            plain prompt with no forced choice.
        expects: What kind of answer completes the question.
    """

    prompt: str
    options: tuple["Intent", ...] = ()
    expects: MissingField = MissingField.CLARIFICATION


@dataclass(frozen=True)
class Intent:
    """The result of parsing one line of player input.

    Attributes:
        raw: The input exactly as given.
        normalized: Normalized form of the input.
        kind: Command, query, help or unknown.
        verb: Canonical command name, empty when unresolved.
        args: Resolved arguments in order.
        quantity: Optional quantity ("all", "3", "2h").
        movement: Optional movement scale for travel.
        confidence: Parse confidence in [0, 1].
        clarify: Question to ask instead of acting.
        risk_confirmed: Whether the player already confirmed a risky action.
    """

    raw: str = ""
    normalized: str = ""
    kind: IntentKind = IntentKind.UNKNOWN
    verb: str = ""
    args: tuple[str, ...] = ()
    quantity: Quantity | None = None
    movement: MovementScale | None = None
    confidence: float = 0.0
    clarify: ClarifyQuestion | None = None
    risk_confirmed: bool = False

    @property
    def needs_clarification(self) -> bool:
        """Whether the host should ask before acting."""
        return self.clarify is not None

    @property
    def is_resolved(self) -> bool:
        """Whether the intent maps to a command and can be executed."""
        return bool(self.verb) and self.clarify is None

    def __str__(self) -> str:
        """Human-readable representation."""
        if self.clarify:
            return f"[Needs clarification: {self.clarify.prompt}]"
        return intent_to_command_string(self) or "[Unresolved]"


@dataclass(frozen=True)
class ParseContext:
    """Snapshot of the game world supplied by the host for one parse.

    Attributes:
        inventory: Names of carried items.
        nearby: Names of entities in reach.
        known_directions: Direction vocabulary for the current location.
        last_entity: Entity most recently referred to, for pronouns.
    """

    inventory: tuple[str, ...] = ()
    nearby: tuple[str, ...] = ()
    known_directions: tuple[str, ...] = ()
    last_entity: str = ""


@dataclass(frozen=True)
class CommandDef:
    """Definition of a command the parser can match.

    Attributes:
        canonical: Canonical verb name.
        aliases: Alternative phrases; each may span several words.
        min_args: Minimum argument count.
        max_args: Maximum argument count (extra arguments are dropped).
        handler_key: Key the host dispatches on; defaults to canonical.
    """

    canonical: str
    aliases: tuple[str, ...] = ()
    min_args: int = 0
    max_args: int = 0
    handler_key: str = ""


@dataclass(frozen=True)
class PendingIntent:
    """An intent waiting on the player's answer to a clarification.

    Stored by the host between parse calls.

    Attributes:
        original_kind: Kind of the clarified intent.
        original_verb: Verb of the clarified intent.
        filled_args: Arguments already known.
        missing_fields: Fields still needed, in the order they are asked.
        prompt: Prompt last shown to the player.
        options: Ranked options last shown.
        movement: Movement scale already known.
        quantity: Quantity already known.
        partial_value: Bare number waiting for a unit ("go 5").
    """

    original_kind: IntentKind = IntentKind.COMMAND
    original_verb: str = ""
    filled_args: tuple[str, ...] = ()
    missing_fields: tuple[MissingField, ...] = ()
    prompt: str = ""
    options: tuple[Intent, ...] = ()
    movement: MovementScale | None = None
    quantity: Quantity | None = None
    partial_value: str = ""

    @property
    def next_field(self) -> MissingField | None:
        """The field the next answer should fill."""
        return self.missing_fields[0] if self.missing_fields else None


def _movement_phrase(movement: MovementScale) -> str:
    if movement.condition == MovementCondition.DARK:
        return "until dark"
    if movement.condition == MovementCondition.TIRED:
        return "until exhausted"
    if movement.tiles is not None:
        return f"{movement.tiles} tiles"
    if movement.distance_meters > 0:
        meters = f"{movement.distance_meters:.3f}".rstrip("0").rstrip(".")
        return f"{meters}m"
    if movement.duration_minutes > 0:
        return f"{movement.duration_minutes}min"
    return ""


def intent_to_command_string(intent: Intent) -> str:
    """Rebuild a normalized "verb arg1 arg2 ... [quantity]" command line.

    Unresolved intents (empty verb) format to an empty string.

    Examples:
        >>> intent_to_command_string(Intent(verb="take", args=("stick",)))
        'take stick'
    """
    from trailparse.parser.normalize import normalize

    verb = normalize(intent.verb)
    if not verb:
        return ""

    parts = [verb]
    for arg in intent.args:
        if n := normalize(arg):
            parts.append(n)
    if intent.quantity is not None and intent.quantity.raw:
        parts.append(normalize(intent.quantity.raw))
    if intent.movement is not None:
        if phrase := _movement_phrase(intent.movement):
            parts.append(phrase)
    return " ".join(parts)
