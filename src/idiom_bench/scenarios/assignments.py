"""Copying a batch of fields into a record that lives behind a nullable cell."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Tuple

from idiom_bench.core.atomic import AtomicReference
from idiom_bench.harness.policy import MutationPolicy
from idiom_bench.harness.registry import Scenario, StabilityPlan
from idiom_bench.harness.variant import Variant, require_present

FIELDS: Tuple[str, ...] = (
    "bg_drm_info",
    "sing_drm_info",
    "backing_track_url",
    "original_sing_url",
    "tune_align_offset",
    "show_ai_gallery_tab",
    "duet_groups",
    "cowork_groups",
    "crypt_mel_midi_urls",
)


@dataclass(frozen=True, slots=True)
class MusicInfo:
    bg_drm_info: str
    sing_drm_info: str
    backing_track_url: str
    original_sing_url: str
    tune_align_offset: int
    show_ai_gallery_tab: bool
    duet_groups: Tuple[str, ...]
    cowork_groups: Tuple[str, ...]
    crypt_mel_midi_urls: Tuple[str, ...]


class MusicInfoData:
    """Mutable destination record."""

    __slots__ = FIELDS

    def __init__(self) -> None:
        self.bg_drm_info = ""
        self.sing_drm_info = ""
        self.backing_track_url = ""
        self.original_sing_url = ""
        self.tune_align_offset = 0
        self.show_ai_gallery_tab = False
        self.duet_groups: Tuple[str, ...] = ()
        self.cowork_groups: Tuple[str, ...] = ()
        self.crypt_mel_midi_urls: Tuple[str, ...] = ()

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, name) for name in FIELDS)


def sample_music_info() -> MusicInfo:
    return MusicInfo(
        bg_drm_info="drm123",
        sing_drm_info="singDrm456",
        backing_track_url="http://example.com/backing.mp3",
        original_sing_url="http://example.com/original.mp3",
        tune_align_offset=100,
        show_ai_gallery_tab=True,
        duet_groups=("group1", "group2"),
        cowork_groups=("cowork1", "cowork2"),
        crypt_mel_midi_urls=("midi1", "midi2"),
    )


STRESS_INFO = MusicInfo("drm", "sing", "backing", "original", 100, True, (), (), ())


def repeated_require(cell: AtomicReference, info: MusicInfo) -> tuple:
    require_present(cell.get(), "music_info_data").bg_drm_info = info.bg_drm_info
    require_present(cell.get(), "music_info_data").sing_drm_info = info.sing_drm_info
    require_present(cell.get(), "music_info_data").backing_track_url = info.backing_track_url
    require_present(cell.get(), "music_info_data").original_sing_url = info.original_sing_url
    require_present(cell.get(), "music_info_data").tune_align_offset = info.tune_align_offset
    require_present(cell.get(), "music_info_data").show_ai_gallery_tab = info.show_ai_gallery_tab
    require_present(cell.get(), "music_info_data").duet_groups = info.duet_groups
    require_present(cell.get(), "music_info_data").cowork_groups = info.cowork_groups
    require_present(cell.get(), "music_info_data").crypt_mel_midi_urls = info.crypt_mel_midi_urls
    return require_present(cell.get(), "music_info_data").as_tuple()


def setattr_loop(cell: AtomicReference, info: MusicInfo) -> Optional[tuple]:
    data = cell.get()
    if data is None:
        return None
    for name in FIELDS:
        setattr(data, name, getattr(info, name))
    return data.as_tuple()


def local_temp(cell: AtomicReference, info: MusicInfo) -> Optional[tuple]:
    data = cell.get()
    if data is not None:
        data.bg_drm_info = info.bg_drm_info
        data.sing_drm_info = info.sing_drm_info
        data.backing_track_url = info.backing_track_url
        data.original_sing_url = info.original_sing_url
        data.tune_align_offset = info.tune_align_offset
        data.show_ai_gallery_tab = info.show_ai_gallery_tab
        data.duet_groups = info.duet_groups
        data.cowork_groups = info.cowork_groups
        data.crypt_mel_midi_urls = info.crypt_mel_midi_urls
        return data.as_tuple()
    return None


def require_once(cell: AtomicReference, info: MusicInfo) -> tuple:
    data = require_present(cell.get(), "music_info_data")
    data.bg_drm_info = info.bg_drm_info
    data.sing_drm_info = info.sing_drm_info
    data.backing_track_url = info.backing_track_url
    data.original_sing_url = info.original_sing_url
    data.tune_align_offset = info.tune_align_offset
    data.show_ai_gallery_tab = info.show_ai_gallery_tab
    data.duet_groups = info.duet_groups
    data.cowork_groups = info.cowork_groups
    data.crypt_mel_midi_urls = info.crypt_mel_midi_urls
    return data.as_tuple()


_VARIANTS = (
    ("repeated_require", repeated_require),
    ("setattr_loop", setattr_loop),
    ("local_temp", local_temp),
    ("require_once", require_once),
)


def build_variants(info: MusicInfo) -> List[Variant]:
    # One destination record per variant keeps their writes invisible to each other.
    return [Variant(name, partial(fn, AtomicReference(MusicInfoData()), info)) for name, fn in _VARIANTS]


def build_stress_variants(cell: AtomicReference) -> List[Variant]:
    return [Variant(name, partial(fn, cell, STRESS_INFO)) for name, fn in _VARIANTS]


def scenarios() -> List[Scenario]:
    return [
        Scenario(
            name="multiple_assignments",
            title="Multiple assignments through a nullable reference",
            build_fixture=sample_music_info,
            build_variants=build_variants,
            warmup_iters=5_000,
            measured_iters=200_000,
            stability=StabilityPlan(
                build_variants=build_stress_variants,
                initial_value=MusicInfoData,
                present_factory=lambda _i: MusicInfoData(),
                thread_count=8,
                iterations_per_thread=20_000,
                policy=MutationPolicy(period=1000, absent_every=2),
            ),
        )
    ]
