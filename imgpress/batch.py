"""
BatchProcessor - 批量处理

每张图像一个任务，线程池大小受 batch.max_workers 限制。
- 单张失败只记录在对应结果中，不影响其他图像
- 结果按输入顺序返回
- cancel(): 只作用于正在运行的批次，未开始的任务被取消，正在执行的任务跑完；
  没有批次运行时调用 cancel() 会被忽略
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed, Future
import threading

from .context import RasterBuffer, ProcessingParameters, ProcessingResult
from .errors import BatchCancelled
from .pipeline import ImagePipeline


@dataclass
class BatchItem:
    """批处理输入：编码字节或已解码的缓冲区二选一"""

    name: str
    data: bytes | None = None
    buffer: RasterBuffer | None = None
    mime_type: str | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "BatchItem":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())


@dataclass
class BatchItemResult:
    """单张图像的处理结果"""

    name: str
    result: ProcessingResult | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


class BatchProcessor:
    """批量处理器"""

    def __init__(self, pipeline: ImagePipeline, max_workers: int | None = None):
        """
        初始化

        Args:
            pipeline: 单图处理 Pipeline（无共享可变状态，可跨线程复用）
            max_workers: 并发上限，默认取 batch.max_workers
        """
        self.pipeline = pipeline
        if max_workers is None:
            max_workers = pipeline.cfg.get("batch", {}).get("max_workers", 4)
        if max_workers < 1:
            raise ValueError(f"max_workers 必须 >= 1，当前: {max_workers}")
        self.max_workers = max_workers

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._running = False
        self._futures: list[Future] = []

    def cancel(self) -> None:
        """取消当前批次中尚未开始的任务"""
        with self._lock:
            if not self._running:
                print("[Batch] 当前没有运行中的批次，忽略取消请求")
                return
            self._cancelled.set()
            pending = list(self._futures)
        cancelled = sum(1 for f in pending if f.cancel())
        print(f"[Batch] 已请求取消，{cancelled} 个未开始的任务被取消")

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def process_batch(
        self,
        items: Iterable[BatchItem],
        params: ProcessingParameters | None = None,
        on_item: Callable[[int, BatchItemResult], None] | None = None,
        on_complete: Callable[[list[BatchItemResult]], None] | None = None
    ) -> list[BatchItemResult]:
        """
        并行处理一批图像

        Args:
            items: 输入列表
            params: 所有图像共用的处理参数，默认取配置
            on_item: 每张图像结束时回调 (index, result)，在调用线程执行
            on_complete: 全部结束后回调一次

        Returns:
            与输入顺序一致的结果列表
        """
        items = list(items)
        if params is None:
            params = self.pipeline.default_parameters()

        with self._lock:
            self._cancelled.clear()
            self._running = True
        results: list[BatchItemResult | None] = [None] * len(items)
        print(f"[Batch] 开始处理 {len(items)} 张图像（max_workers={self.max_workers}）")

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {}
                with self._lock:
                    for index, item in enumerate(items):
                        future = executor.submit(self._process_single, item, params)
                        futures[future] = index
                    self._futures = list(futures)

                for future in as_completed(futures):
                    index = futures[future]
                    name = items[index].name
                    if future.cancelled():
                        item_result = BatchItemResult(name, error=BatchCancelled(f"{name} 已取消"))
                    else:
                        try:
                            item_result = BatchItemResult(name, result=future.result())
                        except Exception as e:
                            print(f"[Batch] Error processing {name}: {e}")
                            item_result = BatchItemResult(name, error=e)

                    results[index] = item_result
                    if on_item is not None:
                        on_item(index, item_result)
        finally:
            with self._lock:
                self._futures = []
                self._running = False

        succeeded = sum(1 for r in results if r.ok)
        print(f"[Batch] 处理完成：成功 {succeeded}/{len(items)}")

        if on_complete is not None:
            on_complete(results)
        return results

    def _process_single(self, item: BatchItem, params: ProcessingParameters) -> ProcessingResult:
        """处理单张图像（在工作线程执行）"""
        if self._cancelled.is_set():
            raise BatchCancelled(f"{item.name} 已取消")

        if item.buffer is not None:
            return self.pipeline.process(item.buffer, params, name=item.name)
        if item.data is None:
            raise ValueError(f"{item.name} 没有输入数据")
        return self.pipeline.process_bytes(item.data, params, item.mime_type, item.name)
