"""Cache-Control directives for objects written by the S3 deploy action.

Directives are given as plain strings (from app.env or DeploySettings) and turned
into `aws_codepipeline_actions.CacheControl` values here. Durations accept a bare
number of seconds or a number with a unit suffix, so "max-age=43200" and
"max-age=12h" are equivalent.
"""
import logging
from re import fullmatch
from typing import Iterable
from typing import List

from aws_cdk import aws_codepipeline_actions as codepipeline_actions
from aws_cdk import Duration

logger = logging.getLogger(__name__)

CacheControl = codepipeline_actions.CacheControl

_SIMPLE_DIRECTIVES = {
    "public": CacheControl.set_public,
    "private": CacheControl.set_private,
    "no-cache": CacheControl.no_cache,
    "no-transform": CacheControl.no_transform,
    "must-revalidate": CacheControl.must_revalidate,
    "proxy-revalidate": CacheControl.proxy_revalidate,
}

_DURATION_DIRECTIVES = {
    "max-age": CacheControl.max_age,
    "s-maxage": CacheControl.s_max_age,
}

_DURATION_UNITS = {
    "": Duration.seconds,
    "s": Duration.seconds,
    "m": Duration.minutes,
    "h": Duration.hours,
    "d": Duration.days,
}


class CacheControlError(ValueError):
    """A Cache-Control directive could not be understood"""


def parse_duration(value: str) -> Duration:
    """Parse "<int>[s|m|h|d]" into a Duration

    Raises:
        CacheControlError: value is not a whole number with an optional unit
    """
    found = fullmatch(r"(\d+)([smhd]?)", value.strip().lower())
    if found is None:
        raise CacheControlError(f"invalid duration '{value}'")
    amount, unit = found.groups()
    return _DURATION_UNITS[unit](int(amount))


def parse_directive(directive: str) -> CacheControl:
    """Turn a single directive into a CacheControl value

    Known directives map onto the matching CacheControl factory. Anything else
    is passed through untouched with `CacheControl.from_string`.

    Args:
        directive (str): e.g. "public", "max-age=12h", "immutable"

    Raises:
        CacheControlError: max-age / s-maxage was given without a valid duration
    """
    directive = directive.strip()
    if not directive:
        raise CacheControlError("empty cache-control directive")
    name, _, argument = directive.partition("=")
    name = name.strip().lower()

    if name in _SIMPLE_DIRECTIVES and not argument:
        return _SIMPLE_DIRECTIVES[name]()
    if name in _DURATION_DIRECTIVES:
        if not argument:
            raise CacheControlError(f"'{name}' needs a duration")
        return _DURATION_DIRECTIVES[name](parse_duration(argument))
    logger.debug(f"Passing through unknown cache-control directive '{directive}'")
    return CacheControl.from_string(directive)


def parse_cache_control(directives: Iterable[str]) -> List[CacheControl]:
    return [parse_directive(x) for x in directives]


def cache_control_header(values: Iterable[CacheControl]) -> str:
    """Render the header the way it appears in the deploy action configuration"""
    return ", ".join(x.value for x in values)
