#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest fixtures for integration tests.

Provides:
- docs_dir: Temporary directory with markdown files
- fake_translator: Translator that marks prose and keeps anchors intact
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


GUIDE_MD = """---
title: Guide
---

# Guide

Read [the install notes][install] first.

## Install

```bash
pip install md-translator
```

## Usage

Call `translate()` and check the result.

[install]: https://example.com/install
"""

PLAIN_MD = """# Notes

Nothing special here.

Second paragraph.
"""


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Directory tree with two markdown files and one text file."""
    (tmp_path / "guide.md").write_text(GUIDE_MD, encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "notes.md").write_text(PLAIN_MD, encoding="utf-8")
    (tmp_path / "readme.txt").write_text("not markdown", encoding="utf-8")
    return tmp_path


@pytest.fixture
def fake_translator():
    """Prefix every non-empty line, leave anchors and link lines alone."""
    async def translate(text: str) -> str:
        lines = []
        for line in text.split("\n"):
            if not line.strip() or line.startswith("⟪") or line.startswith("["):
                lines.append(line)
            elif line.startswith("#"):
                hashes, _, title = line.partition(" ")
                lines.append(f"{hashes} PT {title}")
            else:
                lines.append(f"PT {line}")
        return "\n".join(lines)
    return translate
