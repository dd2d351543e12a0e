"""CSS selector validation."""

import asyncio
import logging
from typing import Callable, Optional

import soupsieve
import tinycss2
from tinycss2.ast import LiteralToken

from selector_scraper.models.schemas import (
    DataSelector,
    SelectorStatus,
    SelectorValidityResponse,
)
from selector_scraper.scrapers.errors import SelectorValidityError

SUPPORTED_LANGUAGE = "css"

# CSS2 pseudo-elements, also allowed with a single colon
LEGACY_PSEUDO_ELEMENTS = {"before", "after", "first-line", "first-letter"}
COMPOUND_BOUNDARIES = {",", ">", "+", "~"}


def _is_literal(token, values) -> bool:
    return token.type == "literal" and token.value in values


def _starts_compound(tokens: list) -> bool:
    """Whether the next token opens a new compound selector."""
    return not tokens or tokens[-1].type == "whitespace" or _is_literal(
        tokens[-1], COMPOUND_BOUNDARIES
    )


def strip_pseudo_elements(prelude: list) -> Optional[str]:
    """
    Remove pseudo-elements from a selector prelude.

    soupsieve matches elements, so it refuses pseudo-elements although they
    are valid selector syntax. A pseudo-element standing alone in its
    compound selector is replaced by ``*``.

    Args:
        prelude: tinycss2 tokens of the rule prelude

    Returns:
        The selector text without pseudo-elements, or None if a
        pseudo-element is malformed or misplaced
    """
    kept = []
    i = 0
    while i < len(prelude):
        token = prelude[i]
        if not _is_literal(token, {":"}):
            kept.append(token)
            i += 1
            continue

        double = i + 1 < len(prelude) and _is_literal(prelude[i + 1], {":"})
        name_index = i + 2 if double else i + 1
        name = prelude[name_index] if name_index < len(prelude) else None
        legacy = (
            not double
            and name is not None
            and name.type == "ident"
            and name.lower_value in LEGACY_PSEUDO_ELEMENTS
        )
        if not (double or legacy):
            # a pseudo-class, left to soupsieve
            kept.append(token)
            i += 1
            continue

        if name is None or name.type not in ("ident", "function"):
            return None

        following = prelude[name_index + 1] if name_index + 1 < len(prelude) else None
        if following is not None and not (
            following.type == "whitespace"
            or _is_literal(following, COMPOUND_BOUNDARIES | {":"})
        ):
            return None

        if _starts_compound(kept):
            kept.append(LiteralToken(token.source_line, token.source_column, "*"))
        i = name_index + 1

    return tinycss2.serialize(kept).strip()


def check_css_rule(rule: str) -> bool:
    """
    Check that a stylesheet made of a single rule is well formed.

    The stylesheet must hold exactly one qualified rule, with an empty
    block and a prelude that compiles as a CSS selector.

    Args:
        rule: Stylesheet text, e.g. ``".price {}"``

    Returns:
        True if the rule is syntactically valid
    """
    nodes = tinycss2.parse_stylesheet(rule, skip_comments=True, skip_whitespace=True)
    if len(nodes) != 1 or nodes[0].type != "qualified-rule":
        return False

    node = nodes[0]
    if any(token.type not in ("whitespace", "comment") for token in node.content):
        return False

    selector = strip_pseudo_elements(node.prelude)
    if not selector:
        return False

    try:
        soupsieve.compile(selector)
    except (soupsieve.SelectorSyntaxError, NotImplementedError):
        # soupsieve also refuses at-rules inside a selector
        return False
    return True


class SelectorValidator:
    """Validate selector paths against the CSS grammar."""

    def __init__(
        self,
        checker: Callable[[str], bool] = check_css_rule,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the validator.

        Args:
            checker: Grammar checker receiving a one-rule stylesheet
            logger: Logger to report to
        """
        self.checker = checker
        self.logger = logger or logging.getLogger(__name__)

    async def validate(self, selector: DataSelector) -> SelectorValidityResponse:
        """
        Validate a selector path.

        The path is wrapped in an empty rule (``"<path> {}"``) because the
        checker validates rules, not bare selectors.

        Args:
            selector: Selector to validate

        Returns:
            SelectorValidityResponse holding a copy of the selector with its status

        Raises:
            SelectorValidityError: If the language is not supported or the
                checker itself fails
        """
        if selector.language not in (SUPPORTED_LANGUAGE, None):
            raise SelectorValidityError(
                f"Unsupported language {selector.language}, only CSS is currently supported",
                selector,
            )

        try:
            valid = await asyncio.to_thread(self.checker, f"{selector.path} {{}}")
        except Exception as e:
            self.logger.error(f"Selector checker failed on '{selector.path}': {e}")
            raise SelectorValidityError(
                f"Could not validate '{selector.path}': {e}", selector
            ) from e

        if valid:
            return SelectorValidityResponse(
                selector=selector.with_status(SelectorStatus.VALID)
            )

        self.logger.debug(f"Invalid selector '{selector.path}'")
        return SelectorValidityResponse(
            selector=selector.with_status(SelectorStatus.INVALID),
            messages=[f"error parsing '{selector.path}'"],
        )
