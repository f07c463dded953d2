"""
Configuration, logging and exception tests.
"""

import json
import logging
import os
import tempfile
import unittest


def logging_record(message: str) -> logging.LogRecord:
    return logging.LogRecord('veloxio.test', logging.INFO, __file__, 1, message, None, None)


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""
    
    def test_base_exception(self):
        from veloxio.exceptions import VFSException
        
        exc = VFSException("Test error", path="/a.txt", error_code=6999)
        
        self.assertEqual(exc.message, "Test error")
        self.assertEqual(exc.error_code, 6999)
        self.assertEqual(exc.context["path"], "/a.txt")
        self.assertIn("6999", str(exc))
        self.assertIn("/a.txt", str(exc))
    
    def test_not_found(self):
        from veloxio.exceptions import NotFoundError, VFSException
        
        exc = NotFoundError("/missing.txt")
        self.assertIsInstance(exc, VFSException)
        self.assertEqual(exc.path, "/missing.txt")
        self.assertEqual(exc.error_code, 6301)
    
    def test_format_error_kinds(self):
        from veloxio.exceptions import (
            BadMagicError,
            DuplicateKeyError,
            FormatError,
            FormatErrorKind,
            TruncatedError,
            UnsupportedVersionError,
        )
        
        cases = [
            (BadMagicError(found=b"ZZZZ"), FormatErrorKind.BAD_MAGIC),
            (UnsupportedVersionError(7), FormatErrorKind.UNSUPPORTED_VERSION),
            (DuplicateKeyError(0xAB), FormatErrorKind.DUPLICATE_KEY),
            (TruncatedError("short"), FormatErrorKind.TRUNCATED),
        ]
        for exc, kind in cases:
            with self.subTest(kind=kind):
                self.assertIsInstance(exc, FormatError)
                self.assertEqual(exc.kind, kind)
                self.assertEqual(exc.context["kind"], kind.value)
    
    def test_sanitize_errors(self):
        from veloxio.exceptions import DecodeError, PathRejectedError, SanitizeError
        
        exc = PathRejectedError("/../x", reason="dot segment")
        self.assertIsInstance(exc, SanitizeError)
        self.assertEqual(exc.reason, "dot segment")
        self.assertIsInstance(DecodeError("/%zz"), SanitizeError)

    def test_context_is_copied(self):
        """A shared context dict is not written through by exceptions."""
        from veloxio.exceptions import (
            ArchiveIOError,
            BadMagicError,
            DecodeError,
            FormatError,
            IntegrityError,
            PathRejectedError,
            UnsupportedVersionError,
            VFSException,
        )

        shared = {'archive': 'base.pak'}
        raised = [
            VFSException("boom", path="/a.txt", context=shared),
            DecodeError("/%zz", reason="bad escape", context=shared),
            PathRejectedError("/../x", reason="dot segment", context=shared),
            FormatError("bad", path="base.pak", context=shared),
            BadMagicError(found=b"ZZZZ", context=shared),
            UnsupportedVersionError(9, context=shared),
            ArchiveIOError("short read", path="base.pak", context=shared),
            IntegrityError(0xAB, expected=1, actual=2, path="base.pak", context=shared),
        ]

        self.assertEqual(shared, {'archive': 'base.pak'})
        for exc in raised:
            with self.subTest(exc=type(exc).__name__):
                self.assertEqual(exc.context['archive'], 'base.pak')
                self.assertIsNot(exc.context, shared)


class TestLogger(unittest.TestCase):
    """Test the logging system."""
    
    def tearDown(self):
        from veloxio.logger import Logger, LogLevel
        
        Logger.initialize(level=LogLevel.INFO, console_output=False)
    
    def test_logger_singleton(self):
        from veloxio.logger import Logger, get_logger
        
        log1 = Logger('test1')
        log2 = get_logger('test1')
        
        self.assertIs(log1, log2)
        self.assertEqual(log1.subsystem, 'test1')
    
    def test_log_levels(self):
        from veloxio.logger import LogLevel
        
        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertEqual(LogLevel.from_name('warning'), LogLevel.WARNING)
        with self.assertRaises(ValueError):
            LogLevel.from_name('verbose')
    
    def test_buffered_logs(self):
        from veloxio.logger import Logger, LogLevel
        
        Logger.initialize(level=LogLevel.DEBUG, console_output=False)
        Logger.clear_buffered_logs()
        
        log = Logger('buffer-test')
        log.debug("first", context={'n': 1})
        log.warning("second")
        Logger('other').warning("elsewhere")
        
        entries = Logger.get_buffered_logs(subsystem='buffer-test')
        self.assertEqual([e['message'] for e in entries], ["first", "second"])
        self.assertEqual(entries[0]['context'], {'n': 1})
        
        warnings = Logger.get_buffered_logs(level='WARNING')
        self.assertEqual(len(warnings), 2)
    
    def test_log_file(self):
        from veloxio.logger import Logger, LogLevel
        
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, 'logs', 'veloxio.log')
            Logger.initialize(level=LogLevel.INFO, log_file=log_file, console_output=False)
            
            Logger('file-test').info("written", context={'path': '/a.txt'})
            Logger.initialize(level=LogLevel.INFO, console_output=False)
            
            with open(log_file, encoding='utf-8') as f:
                content = f.read()
        
        self.assertIn("[file-test] written {path=/a.txt}", content)

    def test_formatter_skips_empty_context_fields(self):
        from veloxio.logger import LogFormatter

        formatter = LogFormatter(use_colors=False)
        record = logging.LogRecord('veloxio.provider', logging.ERROR, __file__, 1, "Failed to mount archive", None, None)
        record.subsystem = 'provider'
        record.context = {'path': 'base.pak', 'error_code': 6201, 'kind': None}

        line = formatter.format(record)

        self.assertTrue(line.endswith("ERROR    [provider] Failed to mount archive {path=base.pak error_code=6201}"))
        self.assertEqual(LogFormatter.format_context({'kind': None}), "")

        bare = logging.LogRecord('veloxio', logging.INFO, __file__, 1, "plain", None, None)
        self.assertTrue(formatter.format(bare).endswith("INFO     [vfs] plain"))

    def test_buffer_filters_by_path(self):
        from veloxio.logger import LogBuffer, Logger, LogLevel

        Logger.initialize(level=LogLevel.DEBUG, console_output=False)
        Logger.clear_buffered_logs()

        context = {'path': '/a.txt'}
        log = Logger('path-test')
        log.info("looked up", context=context)
        log.info("looked up", context={'path': '/b.txt'})
        context['path'] = '/changed.txt'

        entries = Logger.get_buffered_logs(path='/a.txt')
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]['context'], {'path': '/a.txt'})
        self.assertEqual(Logger.get_buffered_logs(path='/changed.txt'), [])

        buffer = LogBuffer(max_entries=2)
        for n in range(3):
            buffer.handle(logging_record(f"entry {n}"))
        self.assertEqual(buffer.max_entries, 2)
        self.assertEqual([e['message'] for e in buffer.get_logs()], ["entry 1", "entry 2"])
        self.assertEqual(buffer.get_logs(limit=0), [])


class TestConfig(unittest.TestCase):
    """Test the configuration system."""
    
    def setUp(self):
        from veloxio.core import ConfigLoader
        
        self.loader = ConfigLoader()
        self.loader.reset()
        self._tmp = tempfile.TemporaryDirectory()
    
    def tearDown(self):
        self.loader.reset()
        self._tmp.cleanup()
    
    def write_config(self, content: str) -> str:
        path = os.path.join(self._tmp.name, 'veloxio.json')
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path
    
    def test_default_config(self):
        from veloxio.core import Config, get_config
        
        config = Config()
        
        self.assertFalse(config.provider.disk_enabled)
        self.assertEqual(config.provider.archives, [])
        self.assertEqual(config.provider.backing, "lazy")
        self.assertTrue(config.provider.verify_checksums)
        self.assertEqual(config.logging.level, "INFO")
        self.assertEqual(get_config(), config)
    
    def test_load(self):
        from veloxio.core import get_config
        
        path = self.write_config(json.dumps({
            'provider': {
                'disk_enabled': True,
                'disk_root': '/srv/assets',
                'archives': ['base.pak', 'patch.pak'],
                'backing': 'buffered',
            },
            'logging': {'level': 'DEBUG'},
        }))
        
        config = self.loader.load(path)
        
        self.assertTrue(config.provider.disk_enabled)
        self.assertEqual(config.provider.archives, ['base.pak', 'patch.pak'])
        self.assertEqual(config.provider.backing, 'buffered')
        self.assertTrue(config.provider.verify_checksums)
        self.assertEqual(config.logging.level, 'DEBUG')
        self.assertTrue(config.logging.console_output)
        self.assertIs(get_config(), config)
        self.assertEqual(self.loader.get('provider.disk_root'), '/srv/assets')
        self.assertEqual(self.loader.get('provider.nothing', 'fallback'), 'fallback')
    
    def test_missing_file(self):
        from veloxio.exceptions import ConfigError
        
        with self.assertRaises(ConfigError):
            self.loader.load(os.path.join(self._tmp.name, 'absent.json'))
    
    def test_invalid_json(self):
        from veloxio.exceptions import ConfigError
        
        with self.assertRaises(ConfigError):
            self.loader.load(self.write_config('{not json'))
        with self.assertRaises(ConfigError):
            self.loader.load(self.write_config('[]'))
    
    def test_configure_logging(self):
        from veloxio.core import Config, configure_logging
        from veloxio.exceptions import ConfigError
        from veloxio.logger import Logger, LogLevel

        log_file = os.path.join(self._tmp.name, 'vfs.log')
        config = Config()
        config.logging.level = 'debug'
        config.logging.log_file = log_file
        config.logging.console_output = False

        try:
            configure_logging(config)
            Logger('config-test').debug("debug enabled")
        finally:
            Logger.initialize(level=LogLevel.INFO, console_output=False)

        with open(log_file, encoding='utf-8') as f:
            self.assertIn("[config-test] debug enabled", f.read())

        config.logging.level = 'chatty'
        with self.assertRaises(ConfigError):
            configure_logging(config)

    def test_invalid_backing(self):
        from veloxio.exceptions import ConfigError
        
        path = self.write_config(json.dumps({'provider': {'backing': 'mmap'}}))
        with self.assertRaises(ConfigError):
            self.loader.load(path)

    def test_archives_must_be_list_of_paths(self):
        from veloxio.exceptions import ConfigError
        
        for archives in ('base.pak', ['base.pak', 3]):
            with self.subTest(archives=archives):
                path = self.write_config(json.dumps({'provider': {'archives': archives}}))
                with self.assertRaises(ConfigError):
                    self.loader.load(path)
        self.assertEqual(self.loader.config.provider.archives, [])

    def test_boolean_keys_reject_strings(self):
        from veloxio.exceptions import ConfigError
        
        cases = [
            {'provider': {'disk_enabled': 'false'}},
            {'provider': {'verify_checksums': 0}},
            {'logging': {'console_output': 'no'}},
        ]
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError) as ctx:
                    self.loader.load(self.write_config(json.dumps(data)))
                self.assertIn("must be a boolean", ctx.exception.message)

    def test_section_must_be_object(self):
        from veloxio.exceptions import ConfigError
        
        for data in ({'provider': []}, {'logging': 'DEBUG'}, {'provider': None}):
            with self.subTest(data=data):
                with self.assertRaises(ConfigError) as ctx:
                    self.loader.load(self.write_config(json.dumps(data)))
                self.assertEqual(ctx.exception.error_code, 6401)

    def test_string_keys_reject_other_types(self):
        from veloxio.exceptions import ConfigError
        
        for data in ({'provider': {'disk_root': 1}}, {'logging': {'level': 20}}, {'logging': {'log_file': False}}):
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    self.loader.load(self.write_config(json.dumps(data)))

        config = self.loader.load(self.write_config(json.dumps({'logging': {'log_file': None}})))
        self.assertIsNone(config.logging.log_file)


if __name__ == '__main__':
    unittest.main()
