"""Shortcode expansion for Markdown sources.

Shortcodes use the processing-instruction syntax ``<?# Name key="value" /?>``
and are expanded before the Markdown is rendered.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping

from ..config import PROD_SITE_URL

SHORTCODE_PATTERN = re.compile(
    r"<\?#\s*(?P<name>[A-Za-z][\w-]*)(?P<args>(?:\s+[^?]*?)?)\s*/?\?>",
)
ARG_PATTERN = re.compile(r"""(?P<key>[\w-]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"']+))""")

Shortcode = Callable[[dict[str, str]], str]


def parse_args(raw: str) -> dict[str, str]:
    """Parse ``key="value"`` pairs from a shortcode."""
    args: dict[str, str] = {}
    for m in ARG_PATTERN.finditer(raw or ""):
        value = m.group("dq")
        if value is None:
            value = m.group("sq")
        if value is None:
            value = m.group("bare") or ""
        args[m.group("key")] = value
    return args


def full_url(args: dict[str, str], env: Mapping[str, str] | None = None) -> str:
    """Absolute URL for a site path, honouring preview deployments.

    Preview builds (``VERCEL_ENV`` other than ``production``) point at
    ``VERCEL_URL`` when it is set.
    """
    if "path" not in args:
        raise ValueError("FullUrl shortcode requires a path argument")

    env = os.environ if env is None else env
    if env.get("VERCEL_ENV", "development") != "production":
        host = env.get("VERCEL_URL") or PROD_SITE_URL
    else:
        host = PROD_SITE_URL

    if host.endswith("/"):
        host = host[:-1]
    if host.startswith("https://"):
        host = host[len("https://"):]

    path = args.get("path") or ""
    if path.startswith("/"):
        path = path[1:]

    return f"https://{host}/{path}"


SHORTCODES: dict[str, Shortcode] = {
    "fullurl": full_url,
}


def expand_shortcodes(text: str, shortcodes: Mapping[str, Shortcode] | None = None) -> str:
    """Replace every known shortcode in text. Unknown shortcodes are kept."""
    table = SHORTCODES if shortcodes is None else shortcodes

    def _repl(m: re.Match[str]) -> str:
        fn = table.get(m.group("name").lower())
        if fn is None:
            return m.group(0)
        return fn(parse_args(m.group("args")))

    return SHORTCODE_PATTERN.sub(_repl, text)
