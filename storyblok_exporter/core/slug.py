"""URL slug generation for Storyblok stories."""

import re

_NON_SLUG_RUN = re.compile(r"[^A-Za-z0-9-]+")


def generate_slug(title: str) -> str:
    """Turn a title into a Storyblok slug.

    Every run of characters outside ``[A-Za-z0-9-]`` becomes a single ``-``
    and the result is lower-cased. Slugs are not made unique, so titles that
    only differ in punctuation produce the same slug.

    Args:
        title: The article title.

    Returns:
        The slug, e.g. ``"a-b-test-50-off-"`` for ``"A/B Test: 50% Off!"``.
    """
    return _NON_SLUG_RUN.sub("-", title).lower()
