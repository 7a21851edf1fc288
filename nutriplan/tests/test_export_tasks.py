import unittest

from nutriplan.logic.export.errors import ExportInProgressError
from nutriplan.logic.export.tasks import ExportGuard, ExportTask, TaskState


class TestExportTask(unittest.TestCase):
    def test_settles_once(self):
        task = ExportTask("pdf", "p1")
        self.assertIs(task.state, TaskState.PENDING)
        task.cancel()
        self.assertIs(task.state, TaskState.PENDING)
        task.settle(result="ok")
        self.assertIs(task.state, TaskState.SETTLED)
        self.assertTrue(task.succeeded)
        with self.assertRaises(RuntimeError):
            task.settle(error=ValueError("late"))

    def test_settle_with_error(self):
        task = ExportTask("image", "p1")
        task.settle(error=ValueError("boom"))
        self.assertFalse(task.succeeded)


class TestExportGuard(unittest.TestCase):
    def test_reentry_rejected_per_plan_and_kind(self):
        guard = ExportGuard()
        with guard.running("pdf", "p1"):
            self.assertTrue(guard.is_running("pdf", "p1"))
            with self.assertRaises(ExportInProgressError):
                with guard.running("pdf", "p1"):
                    pass
            with guard.running("pdf", "p2"):
                pass
            with guard.running("sheet", "p1"):
                pass
        self.assertFalse(guard.is_running("pdf", "p1"))

    def test_released_after_failure(self):
        guard = ExportGuard()
        with self.assertRaises(ValueError):
            with guard.running("image", "p1"):
                raise ValueError("boom")
        self.assertFalse(guard.is_running("image", "p1"))


if __name__ == "__main__":
    unittest.main()
