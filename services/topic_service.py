from __future__ import annotations

from typing import Iterable, List

from sqlalchemy.orm import Session

from models.topic import Topic


def get_topic(db: Session, topic_id: int) -> Topic | None:
    return db.get(Topic, topic_id)


def get_topics_by_ids(db: Session, topic_ids: Iterable[int]) -> List[Topic]:
    """Topics for the given ids, in the given order. Ids with no topic are skipped."""
    wanted: List[int] = []
    for raw in topic_ids or []:
        try:
            topic_id = int(raw)
        except (TypeError, ValueError):
            continue
        if topic_id not in wanted:
            wanted.append(topic_id)
    if not wanted:
        return []

    by_id = {t.id: t for t in db.query(Topic).filter(Topic.id.in_(wanted)).all()}
    return [by_id[i] for i in wanted if i in by_id]
