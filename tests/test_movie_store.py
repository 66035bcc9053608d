# tests/test_movie_store.py
import asyncio

import pytest

from cinema_api.errors import (
    EditConflictError,
    ErrorKind,
    PersistenceError,
    RecordNotFoundError,
    StorageTimeoutError
)
from cinema_api.movies.filters import Filters
from cinema_api.movies.models import Movie

CATALOG = [
    ("Moana", 2016, 107, ["animation", "adventure"]),
    ("Black Panther", 2018, 134, ["action", "adventure"]),
    ("Deadpool", 2016, 108, ["action", "comedy"]),
    ("The Breakfast Club", 1986, 96, ["drama"]),
    ("Inception", 2010, 148, ["action", "sci-fi"]),
]


async def seed(store):
    return [
        await store.insert(Movie(title=title, year=year, runtime=runtime, genres=genres))
        for title, year, runtime, genres in CATALOG
    ]


async def test_insert_assigns_id_created_at_and_version(movie_store):
    movie = await movie_store.insert(
        Movie(title="Inception", year=2010, runtime=148, genres=["action", "sci-fi"])
    )

    assert movie.id >= 1
    assert movie.version == 1
    assert movie.created_at is not None
    assert await movie_store.get(movie.id) == movie


async def test_ids_are_never_reused(movie_store):
    first = await movie_store.insert(Movie(title="A", year=2000, runtime=90, genres=["drama"]))
    await movie_store.delete(first.id)
    second = await movie_store.insert(Movie(title="B", year=2000, runtime=90, genres=["drama"]))

    assert second.id > first.id


@pytest.mark.parametrize("movie_id", [0, -1, 999])
async def test_get_missing_movie(movie_store, movie_id):
    with pytest.raises(RecordNotFoundError) as exc_info:
        await movie_store.get(movie_id)
    assert exc_info.value.kind is ErrorKind.NOT_FOUND


async def test_update_bumps_version(movie_store):
    movie = await movie_store.insert(Movie(title="Moana", year=2015, runtime=107, genres=["animation"]))

    updated = await movie_store.update(movie.model_copy(update={"year": 2016}))

    assert updated.version == 2
    stored = await movie_store.get(movie.id)
    assert stored.year == 2016
    assert stored.version == 2


async def test_stale_update_conflicts_and_retry_with_current_version_succeeds(movie_store):
    movie = await movie_store.insert(
        Movie(title="Inception", year=2010, runtime=148, genres=["action", "sci-fi"])
    )
    assert movie.version == 1
    await movie_store.update(movie.model_copy(update={"runtime": 150}))

    with pytest.raises(EditConflictError) as exc_info:
        await movie_store.update(movie.model_copy(update={"year": 2011}))
    assert exc_info.value.kind is ErrorKind.EDIT_CONFLICT
    assert (await movie_store.get(movie.id)).runtime == 150

    current = await movie_store.get(movie.id)
    assert current.version == 2

    retried = await movie_store.update(current.model_copy(update={"year": 2011}))
    assert retried.version == 3

    stored = await movie_store.get(movie.id)
    assert stored == retried
    assert (stored.title, stored.year, stored.runtime, stored.genres) == (
        "Inception", 2011, 150, ["action", "sci-fi"]
    )


async def test_racing_updates_from_same_version_only_one_wins(movie_store):
    movie = await movie_store.insert(Movie(title="Deadpool", year=2016, runtime=108, genres=["action"]))
    first = await movie_store.get(movie.id)
    second = await movie_store.get(movie.id)

    results = await asyncio.gather(
        movie_store.update(first.model_copy(update={"title": "Deadpool (2016)"})),
        movie_store.update(second.model_copy(update={"title": "Deadpool!"})),
        return_exceptions=True
    )

    assert sum(isinstance(result, Movie) for result in results) == 1
    assert sum(isinstance(result, EditConflictError) for result in results) == 1
    assert (await movie_store.get(movie.id)).version == 2


async def test_update_of_deleted_movie_is_an_edit_conflict(movie_store):
    movie = await movie_store.insert(Movie(title="Moana", year=2016, runtime=107, genres=["animation"]))
    await movie_store.delete(movie.id)

    with pytest.raises(EditConflictError):
        await movie_store.update(movie.model_copy(update={"title": "Moana 2"}))


async def test_delete_twice(movie_store):
    movie = await movie_store.insert(Movie(title="Moana", year=2016, runtime=107, genres=["animation"]))
    await movie_store.delete(movie.id)

    with pytest.raises(RecordNotFoundError):
        await movie_store.delete(movie.id)
    with pytest.raises(RecordNotFoundError):
        await movie_store.get(movie.id)


async def test_get_all_defaults_to_id_order(movie_store):
    seeded = await seed(movie_store)

    movies, metadata = await movie_store.get_all("", [], Filters())

    assert [m.id for m in movies] == [m.id for m in seeded]
    assert metadata.total_records == 5
    assert metadata.current_page == 1
    assert metadata.last_page == 1


async def test_get_all_title_search_is_word_based_and_case_insensitive(movie_store):
    await seed(movie_store)

    movies, metadata = await movie_store.get_all("INCEPTION", [], Filters())
    assert [m.title for m in movies] == ["Inception"]
    assert metadata.total_records == 1

    movies, _ = await movie_store.get_all("club breakfast", [], Filters())
    assert [m.title for m in movies] == ["The Breakfast Club"]

    movies, _ = await movie_store.get_all("incep", [], Filters())
    assert movies == []

    movies, _ = await movie_store.get_all("   ", [], Filters())
    assert movies == []


async def test_get_all_genres_must_all_be_present(movie_store):
    await seed(movie_store)

    movies, _ = await movie_store.get_all("", ["action"], Filters())
    assert {m.title for m in movies} == {"Black Panther", "Deadpool", "Inception"}

    movies, _ = await movie_store.get_all("", ["action", "adventure"], Filters())
    assert [m.title for m in movies] == ["Black Panther"]

    movies, metadata = await movie_store.get_all("", ["western"], Filters())
    assert movies == []
    assert metadata.model_dump() == {}


async def test_get_all_sorts_with_id_tiebreak(movie_store):
    await seed(movie_store)

    movies, _ = await movie_store.get_all("", [], Filters(sort="-year"))
    assert [m.title for m in movies] == ["Black Panther", "Moana", "Deadpool", "Inception", "The Breakfast Club"]

    movies, _ = await movie_store.get_all("", [], Filters(sort="runtime"))
    assert [m.runtime for m in movies] == [96, 107, 108, 134, 148]


async def test_get_all_paginates_and_counts_every_match(movie_store):
    await seed(movie_store)

    movies, metadata = await movie_store.get_all("", [], Filters(page=3, page_size=2))
    assert [m.title for m in movies] == ["Inception"]
    assert metadata.model_dump() == {
        "current_page": 3,
        "page_size": 2,
        "first_page": 1,
        "last_page": 3,
        "total_records": 5,
    }

    movies, metadata = await movie_store.get_all("", [], Filters(page=4, page_size=2))
    assert movies == []
    assert metadata.model_dump() == {}


async def test_get_all_on_empty_catalog(movie_store):
    movies, metadata = await movie_store.get_all("", [], Filters())
    assert movies == []
    assert metadata.total_records == 0


async def test_storage_call_past_deadline_times_out(movie_store):
    runaway = (
        "WITH RECURSIVE counter(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM counter) "
        "SELECT count(*) FROM counter"
    )

    with pytest.raises(StorageTimeoutError) as exc_info:
        await movie_store._fetchall(runaway, timeout=0)
    assert exc_info.value.kind is ErrorKind.TIMEOUT

    # The connection stays usable after an interrupted statement
    movie = await movie_store.insert(Movie(title="Moana", year=2016, runtime=107, genres=["animation"]))
    assert (await movie_store.get(movie.id)).title == "Moana"


@pytest.mark.parametrize("movie_id", [2 ** 63, 99999999999999999999])
async def test_ids_beyond_integer_range_are_not_found(movie_store, user_store, movie_id):
    with pytest.raises(RecordNotFoundError):
        await movie_store.get(movie_id)
    with pytest.raises(RecordNotFoundError):
        await movie_store.delete(movie_id)
    with pytest.raises(RecordNotFoundError):
        await user_store.get(movie_id)


async def test_out_of_range_integer_never_escapes_the_store(movie_store):
    with pytest.raises(PersistenceError) as exc_info:
        await movie_store.insert(Movie(title="Endless", year=2010, runtime=2 ** 63, genres=["drama"]))
    assert exc_info.value.kind is ErrorKind.INTERNAL
    assert exc_info.value.status_code == 500

    movies, _ = await movie_store.get_all("", [], Filters())
    assert movies == []
