"""
The sample corpus: a metadata document (samples_info.json) listing every
sample, plus one .in/.out artifact pair per sample beside it.

    foo.smpd/
        samples_info.json
        0.in  0.out
        1.in  1.out

The metadata document is the only source of ordering and limits; the
artifact files are addressed through it.
"""
import logging
import os
from dataclasses import dataclass
from typing import Iterator

from pydantic import BaseModel, ConfigDict, NonNegativeInt, ValidationError

from .errors import OIHelperError

log = logging.getLogger(__name__)

METADATA_FILE = 'samples_info.json'
SAMPLE_DIR_SUFFIX = '.smpd'


class SampleIOError(OIHelperError):
    """A corpus file could not be created, read or written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f'{reason}: {path}')
        self.path = path


class CorruptCorpus(OIHelperError):
    pass


class InvalidSample(OIHelperError):
    pass


class SampleDescriptor(BaseModel):
    in_file: str
    out_file: str
    timeout_ms: NonNegativeInt
    memory_limit: NonNegativeInt
    points: NonNegativeInt


class SamplesInfo(BaseModel):
    sample_list: list[SampleDescriptor]

    model_config = ConfigDict(extra='allow')


@dataclass
class Sample:
    """A sample with its artifacts read into memory."""
    expected_in: str
    expected_out: str
    timeout_ms: int
    memory_limit: int
    points: int


def _read_text(path: str) -> str:
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SampleIOError(path, f'Error reading sample file ({exc})')


def _write_text(path: str, text: str) -> None:
    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
    except OSError as exc:
        raise SampleIOError(path, f'Error writing sample file ({exc.strerror})')


class SampleCorpus:
    """An ordered collection of samples backed by a metadata document.

    Samples are only ever appended; indices are dense and start at 0.
    """

    def __init__(self, path: str, info: SamplesInfo) -> None:
        self.path = path
        self._info = info

    @staticmethod
    def create(path: str) -> 'SampleCorpus':
        """Write a fresh metadata document with no samples at path."""
        log.debug('Creating sample metadata %s', path)
        corpus = SampleCorpus(path, SamplesInfo(sample_list=[]))
        corpus.save()
        return corpus

    @staticmethod
    def open(path: str) -> 'SampleCorpus':
        """Load the metadata document at path.

        Raises:
            SampleIOError: the file could not be read.
            CorruptCorpus: the file is not valid JSON or does not hold a
                well-formed sample_list.
        """
        content = _read_text(path)
        try:
            info = SamplesInfo.model_validate_json(content)
        except ValidationError as exc:
            raise CorruptCorpus(
                f'The sample list in {path} is broken, please check the file ({exc.error_count()} problem(s), '
                f'first: {exc.errors()[0]["msg"]})'
            )
        return SampleCorpus(path, info)

    def save(self) -> None:
        """Rewrite the whole metadata document."""
        _write_text(self.path, self._info.model_dump_json(indent=2))

    @property
    def directory(self) -> str:
        return os.path.dirname(os.path.abspath(self.path))

    def artifact_path(self, name: str) -> str:
        return os.path.join(self.directory, name)

    def __len__(self) -> int:
        return len(self._info.sample_list)

    def append(self, points: int, timeout_ms: int, memory_limit: int) -> int:
        """Register a new sample with empty artifact files.

        Returns:
            int, index of the new sample.  The caller is expected to fill
            the artifacts right away (see write_sample).
        """
        index = len(self._info.sample_list)
        try:
            descriptor = SampleDescriptor(in_file=f'{index}.in', out_file=f'{index}.out',
                                          timeout_ms=timeout_ms, memory_limit=memory_limit,
                                          points=points)
        except ValidationError as exc:
            fields = ', '.join(str(err["loc"][0]) for err in exc.errors())
            raise InvalidSample(f'Invalid sample #{index} for {self.path}: {fields} must be a non-negative integer')
        for name in (descriptor.in_file, descriptor.out_file):
            _write_text(self.artifact_path(name), '')
        self._info.sample_list.append(descriptor)
        self.save()
        log.debug('Created sample #%d', index)
        return index

    def get(self, index: int) -> SampleDescriptor | None:
        """The descriptor at index, or None past the end of the corpus."""
        if index < 0 or index >= len(self._info.sample_list):
            return None
        return self._info.sample_list[index]

    def write_sample(self, index: int, input_text: str, output_text: str) -> None:
        descriptor = self.get(index)
        if descriptor is None:
            raise IndexError(f'No sample #{index} in {self.path}')
        _write_text(self.artifact_path(descriptor.in_file), input_text)
        _write_text(self.artifact_path(descriptor.out_file), output_text)

    def add_sample(self, input_text: str, output_text: str, points: int,
                   timeout_ms: int, memory_limit: int) -> int:
        index = self.append(points, timeout_ms, memory_limit)
        self.write_sample(index, input_text, output_text)
        return index

    def import_pairs(self, pairs: list[tuple[str, str]], total_points: int = 100,
                     timeout_ms: int = 1000, memory_limit: int = 256) -> list[int]:
        """Append one sample per (input, output) pair, splitting
        total_points evenly.  Integer division: with 3 samples and 100
        points each sample is worth 33.
        """
        if not pairs:
            raise ValueError('No samples to import')
        each_point = total_points // len(pairs)
        indices = []
        for input_text, output_text in pairs:
            index = self.add_sample(input_text, output_text, each_point, timeout_ms, memory_limit)
            log.info('Loaded sample #%d', index)
            indices.append(index)
        return indices

    def load(self, index: int) -> Sample | None:
        """Read the sample at index, artifacts included."""
        descriptor = self.get(index)
        if descriptor is None:
            return None
        return Sample(expected_in=_read_text(self.artifact_path(descriptor.in_file)),
                      expected_out=_read_text(self.artifact_path(descriptor.out_file)),
                      timeout_ms=descriptor.timeout_ms,
                      memory_limit=descriptor.memory_limit,
                      points=descriptor.points)

    def __iter__(self) -> Iterator[Sample]:
        """Every sample in order.  Each call starts over from the first
        sample; a missing artifact stops the iteration with SampleIOError.
        """
        index = 0
        while True:
            sample = self.load(index)
            if sample is None:
                return
            yield sample
            index += 1


def sample_dir(name: str, root: str = '.') -> str:
    return os.path.join(root, f'{name}{SAMPLE_DIR_SUFFIX}')


def metadata_path(name: str, root: str = '.') -> str:
    return os.path.join(sample_dir(name, root), METADATA_FILE)


def init_corpus(name: str, root: str = '.', exist_ok: bool = False) -> SampleCorpus:
    """Create the directory for the corpus called name and an empty
    metadata document in it.

    With exist_ok, an existing metadata document is opened instead of
    being replaced.
    """
    directory = sample_dir(name, root)
    if os.path.exists(directory) and not os.path.isdir(directory):
        raise SampleIOError(directory, 'Cannot create the sample directory because the name is already used')
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as exc:
        raise SampleIOError(directory, f'Cannot create the sample directory ({exc.strerror})')
    path = os.path.join(directory, METADATA_FILE)
    if exist_ok and os.path.exists(path):
        return SampleCorpus.open(path)
    return SampleCorpus.create(path)


def open_corpus(name: str, root: str = '.') -> SampleCorpus:
    return SampleCorpus.open(metadata_path(name, root))
