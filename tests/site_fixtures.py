"""Temporary site folders shared by the viewer and GUI tests."""
import json
import os
import tempfile

CELESTE = """---
summary: Climb the mountain.
images: ["one.png", "two.png"]
videos:
  - https://youtu.be/abcdefg
---
Celeste body.
"""

HOLLOW = "Hollow Knight body.\nSecond line.\n"


def make_site(config=None, index=None, files=None):
    """Create a temporary site folder and return its path."""
    root = tempfile.mkdtemp()
    os.makedirs(os.path.join(root, 'Info'))
    cfg = {
        'localInfo': True,
        'infoBasePath': 'Info',
        'imagesRawBaseUrl': 'https://img.example.com/{game}',
    }
    cfg.update(config or {})
    with open(os.path.join(root, 'config.json'), 'w', encoding='utf-8') as f:
        json.dump(cfg, f)
    if index is not None:
        with open(os.path.join(root, 'Info', 'index.json'), 'w', encoding='utf-8') as f:
            json.dump(index, f)
    for name, text in (files or {}).items():
        with open(os.path.join(root, 'Info', name), 'w', encoding='utf-8') as f:
            f.write(text)
    return root
