import os
import shutil
import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers tables on Base.metadata
from database import Base
from models.topic import Topic
from schemas.scenario import ScenarioCreate, ScenarioOut
from services.scenarios.catalog_service import (
    create_scenario,
    get_scenario,
    list_popular_scenarios,
    list_scenarios,
    list_scenarios_by_category,
    record_view,
)
from services.scenarios.descriptor import build_basic_descriptor
from services.scenarios.deterministic_impacts import generate_deterministic_impacts
from services.scenarios.errors import InvalidInputError, ScenarioNotFoundError
from services.scenarios.user_scenario_service import (
    delete_user_scenario,
    get_user_scenario,
    list_user_scenarios,
    save_user_scenario,
    update_user_scenario,
)
from services.topic_service import get_topics_by_ids


def make_engine(path):
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    # Let SQLAlchemy own transactions and take the write lock up front
    @event.listens_for(engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def scenario_payload(title="Rate hike", category="Monetary Policy", stype="interest_rate", **extra):
    details = build_basic_descriptor(stype, 0.75, "increase")
    data = {
        "title": title,
        "description": f"What happens when {stype.replace('_', ' ')} changes?",
        "category": category,
        "difficulty": 2,
        "details": details.model_dump(),
        "impacts": generate_deterministic_impacts(details).model_dump(by_alias=True),
    }
    data.update(extra)
    return ScenarioCreate.model_validate(data)


class DatabaseTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.engine = make_engine(os.path.join(self.tmpdir, "scenarios.db"))
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False)
        self.db = self.Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)


class TestCatalogService(DatabaseTestCase):
    def test_create_and_fetch(self):
        created = create_scenario(self.db, scenario_payload())

        self.assertIsNotNone(created.id)
        self.assertEqual(created.popularity, 0)
        self.assertIn("learningPoints", created.impacts)

        fetched = get_scenario(self.db, created.id)
        out = ScenarioOut.model_validate(fetched)
        self.assertEqual(out.details.change.type, "interest_rate")
        self.assertEqual(out.impacts.markets.stocks.overall, -1.0)

    def test_missing_scenario_is_none(self):
        self.assertIsNone(get_scenario(self.db, 999))

    def test_list_is_ordered_by_id(self):
        a = create_scenario(self.db, scenario_payload("A"))
        b = create_scenario(self.db, scenario_payload("B"))
        self.assertEqual([s.id for s in list_scenarios(self.db)], [a.id, b.id])

    def test_category_match_is_exact(self):
        create_scenario(self.db, scenario_payload("A", category="Trade"))
        create_scenario(self.db, scenario_payload("B", category="Monetary Policy"))

        self.assertEqual([s.title for s in list_scenarios_by_category(self.db, "Trade")], ["A"])
        self.assertEqual(list_scenarios_by_category(self.db, "trade"), [])
        self.assertEqual(list_scenarios_by_category(self.db, "Nope"), [])

    def test_popular_orders_by_views_then_id(self):
        a = create_scenario(self.db, scenario_payload("A"))
        b = create_scenario(self.db, scenario_payload("B"))
        c = create_scenario(self.db, scenario_payload("C"))
        record_view(self.db, c.id)
        record_view(self.db, c.id)
        record_view(self.db, a.id)
        record_view(self.db, b.id)

        popular = list_popular_scenarios(self.db, limit=5)
        self.assertEqual([s.id for s in popular], [c.id, a.id, b.id])
        self.assertEqual([s.id for s in list_popular_scenarios(self.db, limit=1)], [c.id])
        self.assertEqual(list_popular_scenarios(self.db, limit=0), [])

    def test_popular_rejects_negative_limit(self):
        with self.assertRaises(InvalidInputError):
            list_popular_scenarios(self.db, limit=-1)

    def test_record_view_increments(self):
        s = create_scenario(self.db, scenario_payload())
        self.assertEqual(record_view(self.db, s.id).popularity, 1)
        self.assertEqual(record_view(self.db, s.id).popularity, 2)

    def test_record_view_missing(self):
        with self.assertRaises(ScenarioNotFoundError):
            record_view(self.db, 404)

    def test_invalid_impacts_are_rejected(self):
        payload = scenario_payload()
        bad = payload.impacts.model_copy(deep=True)
        bad.markets.stocks.overall = 50
        with self.assertRaises(InvalidInputError) as ctx:
            create_scenario(self.db, payload.model_copy(update={"impacts": bad}))
        self.assertIn("markets.stocks.overall", str(ctx.exception))
        self.assertEqual(list_scenarios(self.db), [])

    def test_concurrent_views_are_not_lost(self):
        s = create_scenario(self.db, scenario_payload())
        scenario_id = s.id
        # refresh left an IMMEDIATE transaction open on this session; release the write lock
        self.db.rollback()

        def view(_):
            session = self.Session()
            try:
                record_view(session, scenario_id)
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(view, range(20)))

        self.db.expire_all()
        self.assertEqual(get_scenario(self.db, scenario_id).popularity, 20)


class TestRelatedTopics(DatabaseTestCase):
    def test_topics_keep_order_and_skip_missing(self):
        t1 = Topic(title="Bonds 101", description="Basics", category="Bonds")
        t2 = Topic(title="Inflation", description="Prices", category="Macro")
        self.db.add_all([t1, t2])
        self.db.commit()

        s = create_scenario(self.db, scenario_payload(related_topic_ids=[t2.id, 999, t1.id, t2.id]))
        self.assertEqual(s.related_topic_ids, [t2.id, 999, t1.id])

        topics = get_topics_by_ids(self.db, s.related_topic_ids)
        self.assertEqual([t.title for t in topics], ["Inflation", "Bonds 101"])

    def test_no_topics(self):
        self.assertEqual(get_topics_by_ids(self.db, []), [])


class TestUserScenarioService(DatabaseTestCase):
    def test_bookmark_lifecycle(self):
        s = create_scenario(self.db, scenario_payload())

        saved = save_user_scenario(self.db, 7, scenario_id=s.id, notes="watch this")
        self.assertEqual(saved.scenario.id, s.id)
        self.assertFalse(saved.is_favorite)

        updated = update_user_scenario(self.db, 7, saved.id, is_favorite=True, custom_parameters={"value": 1.5})
        self.assertTrue(updated.is_favorite)
        self.assertEqual(updated.notes, "watch this")
        self.assertEqual(updated.custom_parameters, {"value": 1.5})

        self.assertEqual([u.id for u in list_user_scenarios(self.db, 7)], [saved.id])
        self.assertEqual(list_user_scenarios(self.db, 8), [])
        self.assertIsNone(get_user_scenario(self.db, 8, saved.id))

        delete_user_scenario(self.db, 7, saved.id)
        self.assertEqual(list_user_scenarios(self.db, 7), [])
        self.assertIsNotNone(get_scenario(self.db, s.id))

    def test_duplicate_bookmark(self):
        s = create_scenario(self.db, scenario_payload())
        save_user_scenario(self.db, 7, scenario_id=s.id)
        with self.assertRaises(ValueError):
            save_user_scenario(self.db, 7, scenario_id=s.id)

    def test_unique_constraint_collision_reads_as_duplicate(self):
        s = create_scenario(self.db, scenario_payload())
        save_user_scenario(self.db, 7, scenario_id=s.id)

        # the pre-insert lookup misses, as it would for a save racing another one
        with patch("services.scenarios.user_scenario_service._find_bookmark", return_value=None):
            with self.assertRaises(ValueError) as ctx:
                save_user_scenario(self.db, 7, scenario_id=s.id)

        self.assertEqual(str(ctx.exception), "Scenario already saved")
        self.assertEqual(len(list_user_scenarios(self.db, 7)), 1)

    def test_bookmark_unknown_scenario(self):
        with self.assertRaises(ScenarioNotFoundError):
            save_user_scenario(self.db, 7, scenario_id=12345)

    def test_other_users_cannot_touch_bookmark(self):
        s = create_scenario(self.db, scenario_payload())
        saved = save_user_scenario(self.db, 7, scenario_id=s.id)
        with self.assertRaises(ValueError):
            update_user_scenario(self.db, 8, saved.id, notes="mine now")
        with self.assertRaises(ValueError):
            delete_user_scenario(self.db, 8, saved.id)


if __name__ == "__main__":
    unittest.main()
