import os
import sys
import unittest
import keyring
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig

class DummyKeyring(keyring.backend.KeyringBackend):
    priority = 1
    def __init__(self):
        self.store = {}
    def get_password(self, service, username):
        return self.store.get((service, username))
    def set_password(self, service, username, password):
        self.store[(service, username)] = password
    def delete_password(self, service, username):
        self.store.pop((service, username), None)

class SettingsEncryptionTest(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = DummyKeyring()
        keyring.set_keyring(self.backend)
        os.environ['ENCRYPT_SETTINGS'] = '1'
        self.path = 'enc_settings.yaml'
        if os.path.exists(self.path):
            os.remove(self.path)

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        os.environ.pop('ENCRYPT_SETTINGS', None)

    def test_encrypt_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'api_token':'secret', 'language':'ru'})
        self.assertTrue(os.path.exists(self.path))
        with open(self.path, encoding='utf-8') as f:
            self.assertNotIn('secret', f.read())
        self.assertEqual(self.backend.store[('training-tracker', 'api_token')], 'secret')
        data = cfg.load()
        self.assertEqual(data['api_token'], 'secret')
        self.assertEqual(data['language'], 'ru')

    def test_missing_secret_is_dropped(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'api_token':'secret'})
        self.backend.store.clear()
        self.assertNotIn('api_token', cfg.load())

    def test_plain_without_flag(self) -> None:
        os.environ.pop('ENCRYPT_SETTINGS', None)
        cfg = YamlConfig(self.path)
        cfg.save({'api_token':'visible'})
        with open(self.path, encoding='utf-8') as f:
            self.assertIn('visible', f.read())

    def test_invalid_settings_rejected(self) -> None:
        cfg = YamlConfig(self.path, encrypt=False)
        with self.assertRaises(ValueError):
            cfg.save({'port': 70000})
        self.assertFalse(os.path.exists(self.path))
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write('default_formula: wendler\n')
        with self.assertRaises(ValueError):
            cfg.load()

    def test_empty_token_stays_in_file(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'api_token':''})
        self.assertNotIn(('training-tracker', 'api_token'), self.backend.store)
        self.assertEqual(cfg.load(), {})

if __name__ == '__main__':
    unittest.main()
