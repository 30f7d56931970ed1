#!/usr/bin/env python3
"""
Tests for ginfo.py: configuration loading, GameViewer and the CLI.

Run with:
    python -m pytest tests/test_ginfo.py
"""
import io
import json
import os
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import ginfo
from app.services.detail_service import MSG_CONTENT_ERROR
from site_fixtures import CELESTE, HOLLOW, make_site


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def _write(self, name, data):
        with open(os.path.join(self.root, name), 'w', encoding='utf-8') as f:
            f.write(data if isinstance(data, str) else json.dumps(data))

    def test_primary_config(self):
        self._write('config.json', {'localInfo': True, 'infoBasePath': 'Docs'})
        config = ginfo.load_config(self.root)
        self.assertTrue(config.local_info)
        self.assertEqual(config.info_base_path, 'Docs')
        self.assertEqual(config.index_path, 'Docs/index.json')

    def test_local_info_string_flags(self):
        for raw, expected in (('false', False), ('False', False), ('0', False), ('', False),
                              ('true', True), ('yes', True), (True, True), (0, False)):
            self._write('config.json', {'localInfo': raw})
            self.assertIs(ginfo.load_config(self.root).local_info, expected, raw)

    def test_fallback_config(self):
        self._write('config.json', '{not json')
        self._write('config.example.json', {'siteRepoOwner': 'o', 'siteRepoName': 'r'})
        config = ginfo.load_config(self.root)
        self.assertFalse(config.local_info)
        self.assertEqual(config.repo_info_line(), 'o/r')

    def test_missing_config_raises(self):
        with self.assertRaises(ginfo.ConfigError):
            ginfo.load_config(self.root)

    def test_non_object_config_rejected(self):
        self._write('config.json', '[1, 2]')
        with self.assertRaises(ginfo.ConfigError):
            ginfo.load_config(self.root)

    def test_token_from_environment(self):
        self._write('config.json', {})
        with patch.dict(os.environ, {'GINFO_GITHUB_TOKEN': 'env-token'}):
            self.assertEqual(ginfo.load_config(self.root).token, 'env-token')
            self.assertEqual(ginfo.load_config(self.root, token='arg').token, 'arg')


class TestGameViewer(unittest.TestCase):

    def setUp(self):
        self.root = make_site(
            index=['Celeste.txt', 'Hollow Knight', 'Missing'],
            files={'Celeste.txt': CELESTE, 'Hollow Knight.txt': HOLLOW},
        )
        self.viewer = ginfo.GameViewer(site_root=self.root)
        self.result = self.viewer.load_catalog()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_catalog_sorted(self):
        self.assertEqual([e.name for e in self.viewer.entries],
                         ['Celeste', 'Hollow Knight', 'Missing'])
        self.assertIsNone(self.result.message)

    def test_card_with_thumbnail_is_memoized(self):
        card = self.viewer.card('Celeste')
        self.assertEqual(card.thumbnail_url, 'https://img.example.com/Celeste/one.png')
        self.assertEqual(card.summary, 'Climb the mountain.')
        self.assertIs(self.viewer.state.thumbnails['Celeste'], card)

    def test_card_without_images(self):
        card = self.viewer.card('Hollow Knight')
        self.assertTrue(card.loaded)
        self.assertIsNone(card.thumbnail_url)
        self.assertEqual(card.summary, 'Hollow Knight body.')

    def test_unknown_card(self):
        self.assertIsNone(self.viewer.card('Zelda'))

    def test_all_cards(self):
        cards = self.viewer.all_cards()
        self.assertEqual([c.loaded for c in cards], [True, True, False])

    def test_open_game(self):
        detail, applied = self.viewer.open_game('Celeste')
        self.assertTrue(applied)
        self.assertEqual(detail.body, 'Celeste body.\n')
        self.assertEqual(detail.images, ['https://img.example.com/Celeste/one.png',
                                         'https://img.example.com/Celeste/two.png'])
        self.assertEqual(detail.videos, ['https://www.youtube.com/embed/abcdefg'])
        self.assertEqual(self.viewer.state.fragment, 'game=Celeste')

    def test_open_missing_text(self):
        detail, _ = self.viewer.open_game('Missing')
        self.assertEqual(detail.body, MSG_CONTENT_ERROR)
        self.assertEqual(detail.images, [])

    def test_open_unknown(self):
        with self.assertRaises(KeyError):
            self.viewer.open_game('Zelda')

    def test_open_fragment(self):
        detail = self.viewer.open_fragment('#game=Hollow%20Knight')
        self.assertEqual(detail.name, 'Hollow Knight')
        self.assertIsNone(self.viewer.open_fragment('#game=Zelda'))

    def test_reload_forgets_thumbnails(self):
        self.viewer.card('Celeste')
        self.viewer.load_catalog()
        self.assertEqual(self.viewer.state.thumbnails, {})
        self.assertIs(self.viewer.cards.memo, self.viewer.state.thumbnails)

    def test_set_token(self):
        self.viewer.set_token('  abc ')
        self.assertEqual(self.viewer.config.token, 'abc')
        self.assertEqual(self.viewer.github.token, 'abc')
        self.viewer.set_token('')
        self.assertIsNone(self.viewer.fetcher.token)

    def test_back_to_grid(self):
        self.viewer.open_game('Celeste')
        self.viewer.back_to_grid()
        self.assertEqual(self.viewer.state.view, 'grid')
        self.assertEqual(self.viewer.state.fragment, '')


class TestEmptyCatalog(unittest.TestCase):

    def test_missing_index_message(self):
        root = make_site()
        try:
            viewer = ginfo.GameViewer(site_root=root)
            result = viewer.load_catalog()
            self.assertEqual(result.entries, [])
            self.assertIn('Info/index.json', viewer.catalog_message)
        finally:
            shutil.rmtree(root, ignore_errors=True)


class TestCli(unittest.TestCase):

    def setUp(self):
        self.root = make_site(index=['Celeste.txt'], files={'Celeste.txt': CELESTE})

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def _run(self, *argv):
        out = io.StringIO()
        with patch.object(sys, 'argv', ['ginfo', '--site-root', self.root] + list(argv)):
            with redirect_stdout(out):
                ginfo.main()
        return out.getvalue()

    def test_list_json(self):
        data = json.loads(self._run('--list', '--json'))
        self.assertEqual([e['name'] for e in data['entries']], ['Celeste'])

    def test_images_json(self):
        data = json.loads(self._run('--images', 'Celeste', '--json'))
        self.assertEqual(len(data), 2)

    def test_unknown_game_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self._run('--show', 'Zelda')
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_config_exits(self):
        os.remove(os.path.join(self.root, 'config.json'))
        with self.assertRaises(SystemExit) as ctx:
            self._run('--list')
        self.assertEqual(ctx.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
