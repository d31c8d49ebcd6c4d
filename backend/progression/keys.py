import json
from typing import NamedTuple


class ProgressKey(NamedTuple):
    """Identifies a student's progress for one lecture: (year, course, lecture)."""
    year: str
    course_id: str
    lecture_id: str

    @classmethod
    def for_lecture(cls, lecture):
        return cls(lecture.course.year, str(lecture.course_id), str(lecture.pk))

    def lookup(self, prefix=''):
        """ORM filter kwargs matching this key, optionally through a relation prefix."""
        return {
            f'{prefix}lecture_id': self.lecture_id,
            f'{prefix}lecture__course_id': self.course_id,
            f'{prefix}lecture__course__year': self.year,
        }

    def encode(self) -> str:
        # JSON keeps ids containing separators intact
        return json.dumps(list(self), separators=(',', ':'))

    @classmethod
    def decode(cls, value: str) -> 'ProgressKey':
        parts = json.loads(value)
        if not isinstance(parts, list) or len(parts) != 3:
            raise ValueError(f"Malformed progress key: {value!r}")
        return cls(*(str(p) for p in parts))
