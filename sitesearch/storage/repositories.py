"""
Repositories: CRUD and filtered queries over the relational store
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

import sqlite3

from .db import Database
from .models import IndexEntry, Lemma, Page, Site, SiteStatus


def _placeholders(values: Sequence) -> str:
    return ", ".join("?" for _ in values)


def _row_to_site(row: sqlite3.Row) -> Site:
    return Site(
        id=row["id"],
        url=row["url"],
        name=row["name"],
        status=SiteStatus(row["status"]),
        status_time=datetime.fromisoformat(row["status_time"]),
        last_error=row["last_error"],
    )


def _row_to_page(row: sqlite3.Row) -> Page:
    return Page(
        id=row["id"],
        site_id=row["site_id"],
        path=row["path"],
        code=row["code"],
        content=row["content"],
    )


def _row_to_lemma(row: sqlite3.Row) -> Lemma:
    return Lemma(
        id=row["id"],
        site_id=row["site_id"],
        lemma=row["lemma"],
        frequency=row["frequency"],
    )


def _row_to_index(row: sqlite3.Row) -> IndexEntry:
    return IndexEntry(
        id=row["id"],
        page_id=row["page_id"],
        lemma_id=row["lemma_id"],
        rank=row["lemma_rank"],
    )


class SiteRepository:
    def __init__(self, db: Database):
        self.db = db

    def find_by_url(self, url: str) -> Optional[Site]:
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM site WHERE url = ?", (url,)).fetchone()
        return _row_to_site(row) if row else None

    def find_all(self) -> List[Site]:
        with self.db.transaction() as conn:
            rows = conn.execute("SELECT * FROM site ORDER BY id").fetchall()
        return [_row_to_site(row) for row in rows]

    def save(self, site: Site) -> Site:
        """Insert a new site or update an existing one"""
        values = (
            site.url,
            site.name,
            site.status.value,
            site.status_time.isoformat(),
            site.last_error or "",
        )
        with self.db.transaction() as conn:
            if site.id is None:
                cursor = conn.execute(
                    "INSERT INTO site (url, name, status, status_time, last_error) VALUES (?, ?, ?, ?, ?)",
                    values,
                )
                site.id = cursor.lastrowid
            else:
                conn.execute(
                    "UPDATE site SET url = ?, name = ?, status = ?, status_time = ?, last_error = ? WHERE id = ?",
                    values + (site.id,),
                )
        return site

    def touch(self, site: Site) -> Site:
        """Refresh status_time only"""
        site.status_time = datetime.now()
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE site SET status_time = ? WHERE id = ?",
                (site.status_time.isoformat(), site.id),
            )
        return site

    def delete(self, site: Site) -> None:
        """Delete a site; pages, lemmas and index rows cascade"""
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM site WHERE id = ?", (site.id,))


class PageRepository:
    def __init__(self, db: Database):
        self.db = db

    def find_by_path_and_site(self, path: str, site: Site) -> Optional[Page]:
        with self.db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM page WHERE path = ? AND site_id = ?", (path, site.id)
            ).fetchone()
        return _row_to_page(row) if row else None

    def find_by_ids(self, page_ids: Iterable[int]) -> Dict[int, Page]:
        ids = list(page_ids)
        if not ids:
            return {}
        with self.db.transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM page WHERE id IN ({_placeholders(ids)})", ids
            ).fetchall()
        return {row["id"]: _row_to_page(row) for row in rows}

    def save(self, page: Page) -> Optional[Page]:
        """Insert a page; returns None when (site, path) is already stored"""
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO page (site_id, path, code, content) VALUES (?, ?, ?, ?)",
                (page.site_id, page.path, page.code, page.content),
            )
            if cursor.rowcount == 0:
                return None
            page.id = cursor.lastrowid
        return page

    def save_all(self, pages: Iterable[Page]) -> List[Page]:
        saved = []
        with self.db.transaction():
            for page in pages:
                if self.save(page) is not None:
                    saved.append(page)
        return saved

    def delete(self, page: Page) -> None:
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM page WHERE id = ?", (page.id,))

    def count(self) -> int:
        with self.db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM page").fetchone()[0]

    def count_by_site(self, site: Site) -> int:
        with self.db.transaction() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM page WHERE site_id = ?", (site.id,)
            ).fetchone()[0]

    def count_by_sites(self, sites: Sequence[Site]) -> int:
        ids = [site.id for site in sites]
        if not ids:
            return 0
        with self.db.transaction() as conn:
            return conn.execute(
                f"SELECT COUNT(*) FROM page WHERE site_id IN ({_placeholders(ids)})", ids
            ).fetchone()[0]

    def find_paths_in_and_site(self, paths: Iterable[str], site: Site) -> List[str]:
        """Return those of ``paths`` that are already stored for ``site``"""
        paths = list(paths)
        if not paths:
            return []
        with self.db.transaction() as conn:
            rows = conn.execute(
                f"SELECT path FROM page WHERE site_id = ? AND path IN ({_placeholders(paths)})",
                [site.id] + paths,
            ).fetchall()
        return [row["path"] for row in rows]


class LemmaRepository:
    def __init__(self, db: Database):
        self.db = db

    def find_by_site(self, site: Site) -> List[Lemma]:
        with self.db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM lemma WHERE site_id = ? ORDER BY lemma", (site.id,)
            ).fetchall()
        return [_row_to_lemma(row) for row in rows]

    def find_by_site_in_and_lemma_in(self, sites: Sequence[Site], lemmas: Iterable[str]) -> List[Lemma]:
        site_ids = [site.id for site in sites]
        lemmas = list(lemmas)
        if not site_ids or not lemmas:
            return []
        with self.db.transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM lemma WHERE site_id IN ({_placeholders(site_ids)}) "
                f"AND lemma IN ({_placeholders(lemmas)})",
                site_ids + lemmas,
            ).fetchall()
        return [_row_to_lemma(row) for row in rows]

    def increment(self, site_id: int, lemma: str) -> Lemma:
        """Create the lemma with frequency 1 or add one to its frequency, atomically"""
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO lemma (site_id, lemma, frequency) VALUES (?, ?, 1)
                ON CONFLICT (site_id, lemma) DO UPDATE SET frequency = frequency + 1
                """,
                (site_id, lemma),
            )
            row = conn.execute(
                "SELECT * FROM lemma WHERE site_id = ? AND lemma = ?", (site_id, lemma)
            ).fetchone()
        return _row_to_lemma(row)

    def save(self, lemma: Lemma) -> Lemma:
        with self.db.transaction() as conn:
            if lemma.id is None:
                cursor = conn.execute(
                    "INSERT INTO lemma (site_id, lemma, frequency) VALUES (?, ?, ?)",
                    (lemma.site_id, lemma.lemma, lemma.frequency),
                )
                lemma.id = cursor.lastrowid
            else:
                conn.execute(
                    "UPDATE lemma SET frequency = ? WHERE id = ?", (lemma.frequency, lemma.id)
                )
        return lemma

    def save_all(self, lemmas: Iterable[Lemma]) -> List[Lemma]:
        with self.db.transaction():
            return [self.save(lemma) for lemma in lemmas]

    def delete_all(self, lemmas: Iterable[Lemma]) -> None:
        ids = [lemma.id for lemma in lemmas]
        if not ids:
            return
        with self.db.transaction() as conn:
            conn.execute(f"DELETE FROM lemma WHERE id IN ({_placeholders(ids)})", ids)

    def count(self) -> int:
        with self.db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM lemma").fetchone()[0]

    def count_by_site(self, site: Site) -> int:
        with self.db.transaction() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM lemma WHERE site_id = ?", (site.id,)
            ).fetchone()[0]


class IndexRepository:
    def __init__(self, db: Database):
        self.db = db

    def save(self, entry: IndexEntry) -> IndexEntry:
        with self.db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO search_index (page_id, lemma_id, lemma_rank) VALUES (?, ?, ?)",
                (entry.page_id, entry.lemma_id, entry.rank),
            )
            entry.id = cursor.lastrowid
        return entry

    def save_all(self, entries: Iterable[IndexEntry]) -> List[IndexEntry]:
        with self.db.transaction():
            return [self.save(entry) for entry in entries]

    def find_lemmas_by_page(self, page: Page) -> List[Lemma]:
        with self.db.transaction() as conn:
            rows = conn.execute(
                """
                SELECT l.* FROM search_index i
                JOIN lemma l ON l.id = i.lemma_id
                WHERE i.page_id = ?
                """,
                (page.id,),
            ).fetchall()
        return [_row_to_lemma(row) for row in rows]

    def find_by_page(self, page: Page) -> List[IndexEntry]:
        with self.db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM search_index WHERE page_id = ?", (page.id,)
            ).fetchall()
        return [_row_to_index(row) for row in rows]

    def find_by_lemma(self, lemma: Lemma) -> List[IndexEntry]:
        with self.db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM search_index WHERE lemma_id = ? ORDER BY page_id", (lemma.id,)
            ).fetchall()
        return [_row_to_index(row) for row in rows]
