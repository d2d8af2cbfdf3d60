"""Shared test fixtures for the storyblok_exporter test suite."""

import pytest


def _article(node_id, title, created, image=None, tags=(), author="u1", body="<p>Body</p>"):
    """Build a ``node--article`` resource as served by Drupal's JSON:API."""
    return {
        "type": "node--article",
        "id": node_id,
        "attributes": {
            "title": title,
            "body": {"value": body, "format": "basic_html"} if body is not None else None,
            "created": created,
            "status": True,
        },
        "relationships": {
            "uid": {"data": {"type": "user--user", "id": author}},
            "field_image": {
                "data": {"type": "file--file", "id": image} if image else None
            },
            "field_tags": {
                "data": [{"type": "taxonomy_term--tags", "id": t} for t in tags]
            },
        },
    }


@pytest.fixture()
def make_article():
    """Factory fixture returning JSON:API article resources."""
    return _article


@pytest.fixture()
def included_resources():
    """Return the ``included`` array referenced by ``jsonapi_document``."""
    return [
        {
            "type": "user--user",
            "id": "u1",
            "attributes": {"display_name": "Alice Smith", "name": "alice"},
        },
        {
            "type": "file--file",
            "id": "f1",
            "attributes": {
                "filename": "hello.jpg",
                "uri": {
                    "value": "public://2024-03/hello.jpg",
                    "url": "/sites/default/files/2024-03/hello.jpg",
                },
            },
        },
        {"type": "taxonomy_term--tags", "id": "t1", "attributes": {"name": "news"}},
        {"type": "taxonomy_term--tags", "id": "t2", "attributes": {"name": "drupal"}},
    ]


@pytest.fixture()
def jsonapi_document(included_resources):
    """A single-page JSON:API response with three published articles.

    - n1: image f1, tags t1, missing, t2, t1 (duplicate and dangling refs)
    - n2: no image, no tags, numeric created timestamp, empty body
    - n3: dangling image reference f404, unknown author
    """
    return {
        "data": [
            _article(
                "n1",
                "Hello, World!",
                "2024-03-05T10:20:30+00:00",
                image="f1",
                tags=("t1", "missing", "t2", "t1"),
            ),
            _article("n2", "No image", 1700000000, body=None),
            _article("n3", "Dangling image", "2024-03-05T10:20:30Z", image="f404", author="u404"),
        ],
        "included": included_resources,
        "links": {"self": {"href": "https://drupal.example.com/jsonapi/node/article"}},
    }
