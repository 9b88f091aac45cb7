from abc import ABC, abstractmethod
import io
import os
from typing import BinaryIO, Dict, Optional


class StreamFunctions(ABC):
    """
    Interface through which the codec opens, reads, writes, seeks and closes
    the files it works on. The codec never touches files directly.
    """

    @abstractmethod
    def open_file(self, filename: str, mode: str) -> Optional[BinaryIO]:
        """
        Open a stream for reading ("rb") or writing ("wb").

        Args:
            filename: Name of the stream
            mode: Binary file mode

        Returns:
            Handle passed to the other methods, or None if opening failed
        """
        pass

    @abstractmethod
    def read_file(self, stream: BinaryIO, size: int) -> bytes:
        """
        Read up to `size` bytes. Fewer bytes means the stream is exhausted.
        """
        pass

    @abstractmethod
    def write_file(self, stream: BinaryIO, data: bytes) -> int:
        """
        Write `data` and return the number of bytes written.
        """
        pass

    @abstractmethod
    def seek_file(self, stream: BinaryIO, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the stream position and return the new absolute position.
        """
        pass

    @abstractmethod
    def close_file(self, stream: BinaryIO) -> None:
        pass


class FileStreamFunctions(StreamFunctions):
    """Local files through the built-in open()"""

    def open_file(self, filename: str, mode: str) -> Optional[BinaryIO]:
        return open(filename, mode)

    def read_file(self, stream: BinaryIO, size: int) -> bytes:
        return stream.read(size)

    def write_file(self, stream: BinaryIO, data: bytes) -> int:
        return stream.write(data)

    def seek_file(self, stream: BinaryIO, offset: int, whence: int = os.SEEK_SET) -> int:
        return stream.seek(offset, whence)

    def close_file(self, stream: BinaryIO) -> None:
        stream.close()


class MemoryStreamFunctions(FileStreamFunctions):
    """
    Named in-memory buffers. Files written here can be read back by name
    through `files` or by opening them again in "rb" mode.
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files: Dict[str, bytes] = dict(files or {})
        self._names: Dict[int, str] = {}

    def open_file(self, filename: str, mode: str) -> Optional[BinaryIO]:
        filename = os.fspath(filename)
        if "r" in mode:
            if filename not in self.files:
                return None
            return io.BytesIO(self.files[filename])

        stream = io.BytesIO()
        self._names[id(stream)] = filename
        return stream

    def close_file(self, stream: BinaryIO) -> None:
        filename = self._names.pop(id(stream), None)
        if filename is not None:
            self.files[filename] = stream.getvalue()
        stream.close()
