"""
Unit Tests for configuration loading and validation
"""

import os
import tempfile
import textwrap
import unittest
from unittest import mock

from utils.config_loader import ConfigLoader
from utils.errors import ConfigError


class TestConfigLoader(unittest.TestCase):

    def setUp(self):
        self.tempDir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tempDir.cleanup)

    def writeConfig(self, content):
        path = os.path.join(self.tempDir.name, 'config.yaml')
        with open(path, 'w') as f:
            f.write(textwrap.dedent(content))
        return path

    def loadAndValidate(self, content):
        loader = ConfigLoader(self.writeConfig(content))
        loader.load()
        return loader.validate()

    def testDefaults(self):
        section = self.loadAndValidate("""
            cloudwatch_logs:
              log_group: /aws/lambda/app
        """)

        self.assertEqual(section['log_group'], ['/aws/lambda/app'])
        self.assertEqual(section['interval'], 60)
        self.assertIsNone(section['max_history'])
        self.assertEqual(section['codec'], 'plain')
        self.assertEqual(section['region'], 'us-east-1')
        self.assertEqual(section['codec_options'], {})

    def testListOfGroupsAndWildcard(self):
        section = self.loadAndValidate("""
            cloudwatch_logs:
              log_group: ["app-*", "/aws/lambda/other"]
              interval: 15
              max_history: 7
        """)

        self.assertEqual(section['log_group'], ['app-*', '/aws/lambda/other'])
        self.assertEqual(section['interval'], 15)
        self.assertEqual(section['max_history'], 7)

    def testEnvironmentSubstitution(self):
        with mock.patch.dict(os.environ, {'POLL_GROUP': 'from-env'}):
            section = self.loadAndValidate("""
                cloudwatch_logs:
                  log_group: ${POLL_GROUP}
            """)
        self.assertEqual(section['log_group'], ['from-env'])

    def testCodecOptions(self):
        section = self.loadAndValidate("""
            cloudwatch_logs:
              log_group: app
              codec_options:
                charset: latin-1
        """)
        self.assertEqual(section['codec_options'], {'charset': 'latin-1'})

        with self.assertRaises(ConfigError):
            self.loadAndValidate("""
                cloudwatch_logs:
                  log_group: app
                  codec_options: latin-1
            """)

    def testMissingLogGroup(self):
        with self.assertRaises(ConfigError):
            self.loadAndValidate("""
                cloudwatch_logs:
                  interval: 10
            """)

    def testInvalidInterval(self):
        for value in ('0', '-1', 'soon', 'true'):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError):
                    self.loadAndValidate(f"""
                        cloudwatch_logs:
                          log_group: app
                          interval: {value}
                    """)

    def testNegativeMaxHistory(self):
        with self.assertRaises(ConfigError):
            self.loadAndValidate("""
                cloudwatch_logs:
                  log_group: app
                  max_history: -3
            """)

    def testObsoleteSincedbPath(self):
        with self.assertRaises(ConfigError) as ctx:
            self.loadAndValidate("""
                cloudwatch_logs:
                  log_group: app
                  sincedb_path: /tmp/sincedb
            """)
        self.assertIn('sincedb_path', str(ctx.exception))

    def testOverridesWinOverFile(self):
        loader = ConfigLoader(self.writeConfig("""
            cloudwatch_logs:
              log_group: app
              interval: 30
        """))
        loader.load()
        loader.applyOverrides(interval=5, max_history=None)
        section = loader.validate()

        self.assertEqual(section['interval'], 5)
        self.assertIsNone(section['max_history'])

    def testWithoutFile(self):
        loader = ConfigLoader()
        loader.load()
        loader.applyOverrides(log_group=['app'])
        self.assertEqual(loader.validate()['log_group'], ['app'])
        self.assertEqual(loader.get('cloudwatch_logs.interval'), 60)
        self.assertEqual(loader.get('output.type', 'stdout'), 'stdout')

    def testMissingFile(self):
        with self.assertRaises(FileNotFoundError):
            ConfigLoader(os.path.join(self.tempDir.name, 'absent.yaml')).load()

    def testInvalidYaml(self):
        with self.assertRaises(ConfigError):
            ConfigLoader(self.writeConfig("cloudwatch_logs: [unclosed")).load()


if __name__ == '__main__':
    unittest.main()
