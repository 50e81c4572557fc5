import unittest

from sqlalchemy import Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from listquery.services.directive_query import apply_query_directive, fetch_page
from listquery.services.query_params import parse_query_params


class _Base(DeclarativeBase):
    pass


class _Article(_Base):
    __tablename__ = "_lq_articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    body: Mapped[str] = mapped_column(String(200))
    status: Mapped[str] = mapped_column(String(20))


class DirectiveQueryTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        _Base.metadata.create_all(cls.engine)
        with Session(cls.engine) as session:
            session.add_all(
                [
                    _Article(id=1, title="Alpha", body="first post", status="draft"),
                    _Article(id=2, title="Beta", body="Second POST", status="published"),
                    _Article(id=3, title="Gamma", body="third", status="published"),
                    _Article(id=4, title="Delta", body="fourth post", status="published"),
                ]
            )
            session.commit()

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def _ids(self, raw, **kwargs):
        directive = parse_query_params(raw)
        with Session(self.engine) as session:
            q = apply_query_directive(session.query(_Article), _Article, directive, **kwargs)
            rows, total = fetch_page(q, directive)
        return [r.id for r in rows], total

    def test_equality_filter_and_ordering(self):
        ids, total = self._ids({"status": ["published"], "ordering": ["-id"]})
        self.assertEqual(ids, [4, 3, 2])
        self.assertEqual(total, 3)

    def test_unknown_fields_are_ignored(self):
        ids, _ = self._ids({"nope": ["x"], "ordering": ["nope"]})
        self.assertEqual(sorted(ids), [1, 2, 3, 4])

    def test_search_is_case_insensitive_across_fields(self):
        ids, total = self._ids({"search": ["post"], "ordering": ["id"]}, search_fields=["title", "body"])
        self.assertEqual(ids, [1, 2, 4])
        self.assertEqual(total, 3)

    def test_pagination_counts_before_slicing(self):
        ids, total = self._ids({"ordering": ["id"], "offset": ["1"], "limit": ["2"]})
        self.assertEqual(ids, [2, 3])
        self.assertEqual(total, 4)

    def test_raw_predicates_are_applied(self):
        ids, _ = self._ids({"ordering": ["id"]}, predicates=["id > 2", ""])
        self.assertEqual(ids, [3, 4])


if __name__ == "__main__":
    unittest.main()
