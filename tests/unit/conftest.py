"""Unit test fixtures: sample schema, seed and catalogs."""

from __future__ import annotations

import pytest


@pytest.fixture()
def schema_data():
    return {
        "version": "1.0.0",
        "name": "test-world",
        "description": "World used by the unit tests",
        "nodeTypes": [
            {"id": "root", "label": "Root", "maxCount": 1},
            {"id": "domain", "label": "Domain", "requiredFields": ["title"]},
            {"id": "character", "label": "Character"},
        ],
        "edgeTypes": [
            {
                "id": "contains",
                "label": "Contains",
                "allowedSourceTypes": ["root"],
                "allowedTargetTypes": ["domain"],
            },
            {"id": "related", "label": "Related"},
        ],
        "constraints": {"requireRootNode": True, "maxDepth": 3},
    }


@pytest.fixture()
def seed_data():
    return {
        "nodes": [
            {"id": "universe", "type": "root"},
            {
                "id": "ai",
                "type": "domain",
                "title": "AI",
                "tags": ["editor"],
                "catalogRefs": {"tools": ["cursor"]},
            },
            {
                "id": "design",
                "type": "domain",
                "title": "Design",
                "pointerTags": ["cap:ai"],
            },
            {"id": "vova", "type": "character"},
        ],
        "edges": [
            {"source": "universe", "target": "ai", "type": "contains"},
            {"source": "universe", "target": "design", "type": "contains"},
            {"source": "ai", "target": "vova", "type": "related"},
        ],
    }


@pytest.fixture()
def tools_catalog():
    return {
        "id": "tools",
        "schema": {"year": "number"},
        "entries": [
            {"id": "vscode", "tags": ["editor", "free"], "year": 2015},
            {"id": "cursor", "tags": ["editor", "ai"], "year": 2023},
            {"id": "figma", "tags": ["design"], "year": 2016},
            {"id": "copilot", "tags": ["ai"], "year": 2021},
        ],
    }


@pytest.fixture()
def catalogs(tools_catalog):
    return {
        "tools": tools_catalog,
        "models": {
            "id": "models",
            "entries": [
                {"id": "gpt", "tags": ["ai", "llm"]},
                {"id": "claude", "tags": ["ai", "llm"]},
            ],
        },
    }
