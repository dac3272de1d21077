from __future__ import annotations

import json
import logging
import os
from unittest.mock import Mock

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.db import DatabaseError
from django.test import TestCase

from apps.core.exceptions import (
    EmptyContentFailure,
    EnterpriseExceptionHandler,
    NotFound,
    TransactionFailure,
    ValidationFailure,
    status_for,
)
from apps.core.transactions import transactional
from apps.core.utils.logging import log_event
from apps.media.models import Picture


class TransactionalTests(TestCase):
    def test_database_error_is_wrapped_and_rolled_back(self):
        with self.assertRaises(TransactionFailure) as ctx:
            with transactional("media.import"):
                Picture.objects.create(filename="half-written.jpg")
                raise DatabaseError("disk full")
        self.assertEqual(ctx.exception.operation, "media.import")
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        self.assertFalse(Picture.objects.filter(filename="half-written.jpg").exists())

    def test_domain_errors_pass_through_after_rollback(self):
        with self.assertRaises(NotFound):
            with transactional("media.import"):
                Picture.objects.create(filename="orphan.jpg")
                raise NotFound("video", 42)
        self.assertFalse(Picture.objects.filter(filename="orphan.jpg").exists())

    def test_commits_on_success(self):
        with transactional("media.import"):
            Picture.objects.create(filename="kept.jpg")
        self.assertTrue(Picture.objects.filter(filename="kept.jpg").exists())


class ExceptionMappingTests(TestCase):
    def payload(self, exc):
        res = EnterpriseExceptionHandler.handle_api_exception(exc)
        return res.status_code, json.loads(res.content)

    def test_status_codes(self):
        self.assertEqual(status_for(NotFound("picture", 1)), 404)
        self.assertEqual(status_for(ValidationFailure("bad")), 400)
        self.assertEqual(status_for(EmptyContentFailure("empty")), 422)
        self.assertEqual(status_for(TransactionFailure("publish", DatabaseError("x"))), 500)
        self.assertEqual(status_for(RuntimeError("x")), 500)

    def test_validation_details_are_per_field(self):
        code, body = self.payload(ValidationFailure({"slug": "A slug is required."}))
        self.assertEqual(code, 400)
        self.assertEqual(body["error"], "validation_failed")
        self.assertEqual(body["details"], {"slug": ["A slug is required."]})

    def test_not_found_and_empty_content(self):
        code, body = self.payload(NotFound("content block", 7))
        self.assertEqual((code, body["error"]), (404, "not_found"))
        code, body = self.payload(EmptyContentFailure({"contents": "empty"}))
        self.assertEqual((code, body["error"]), (422, "empty_content"))

    def test_transaction_failure_hides_details_without_debug(self):
        code, body = self.payload(TransactionFailure("blog.publish", DatabaseError("constraint")))
        self.assertEqual(code, 500)
        self.assertEqual(body["error"], "transaction_failed")
        self.assertNotIn("constraint", body["message"])

    def test_not_found_is_an_object_does_not_exist(self):
        from django.core.exceptions import ObjectDoesNotExist, ValidationError

        self.assertIsInstance(NotFound("picture", 1), ObjectDoesNotExist)
        self.assertIsInstance(EmptyContentFailure("x"), ValidationError)


class LogEventTests(TestCase):
    def test_payload_is_attached_as_event(self):
        logger = logging.getLogger("apps.core.tests")
        with self.assertLogs(logger, level="INFO") as cm:
            log_event(logger, "info", "content.block.created", order=3)
        self.assertEqual(cm.records[0].event, {"order": 3})

    def test_broken_logger_never_raises(self):
        logger = Mock()
        logger.log.side_effect = RuntimeError("handler down")
        self.assertIsNone(log_event(logger, "error", "publish.failed"))
