#!/usr/bin/env python3
"""
Seed the database with a small sample catalog: buildings, individual architects,
group credits and their compositions.

Run after `alembic upgrade head` (from apps/api):
  python ../../scripts/seed_data.py
"""

import asyncio
import logging
import sys

from sqlalchemy import delete

from pocketnavi.core import get_settings
from pocketnavi.db import create_engine, create_session_factory
from pocketnavi.db.models import (
    ArchitectComposition,
    Building,
    BuildingArchitect,
    IndividualArchitect,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ARCHITECTS = [
    {"individual_architect_id": 1, "slug": "tadao-ando", "name_ja": "安藤忠雄", "name_en": "Tadao Ando", "birth_year": "1941"},
    {"individual_architect_id": 2, "slug": "kazuyo-sejima", "name_ja": "妹島和世", "name_en": "Kazuyo Sejima", "birth_year": "1956"},
    {"individual_architect_id": 3, "slug": "ryue-nishizawa", "name_ja": "西沢立衛", "name_en": "Ryue Nishizawa", "birth_year": "1966"},
    {"individual_architect_id": 4, "slug": "kenzo-tange", "name_ja": "丹下健三", "name_en": "Kenzo Tange", "birth_year": "1913", "death_year": "2005"},
]

# Group architect id -> member ids in credit order (SANAA is a two-person group)
COMPOSITIONS = {
    101: [1],
    102: [2, 3],
    103: [4],
}

BUILDINGS = [
    {
        "building_id": 1,
        "slug": "church-of-the-light",
        "title": "光の教会",
        "titleEn": "Church of the Light",
        "buildingTypes": "教会,宗教施設",
        "buildingTypesEn": "Church,Religious facility",
        "location": "大阪府茨木市",
        "locationEn_from_datasheetChunkEn": "Ibaraki, Osaka",
        "completionYears": "1989",
        "lat": 34.8164,
        "lng": 135.5398,
        "groups": [101],
    },
    {
        "building_id": 2,
        "slug": "church-on-the-water",
        "title": "水の教会",
        "titleEn": "Church on the Water",
        "buildingTypes": "教会",
        "buildingTypesEn": "Church",
        "location": "北海道勇払郡占冠村",
        "locationEn_from_datasheetChunkEn": "Shimukappu, Hokkaido",
        "completionYears": "1988",
        "lat": 43.0889,
        "lng": 142.6286,
        "groups": [101],
    },
    {
        "building_id": 3,
        "slug": "21st-century-museum-kanazawa",
        "title": "金沢21世紀美術館",
        "titleEn": "21st Century Museum of Contemporary Art, Kanazawa",
        "buildingTypes": "美術館",
        "buildingTypesEn": "Museum",
        "location": "石川県金沢市",
        "locationEn_from_datasheetChunkEn": "Kanazawa, Ishikawa",
        "completionYears": "2004",
        "lat": 36.5608,
        "lng": 136.6582,
        "groups": [102],
    },
    {
        "building_id": 4,
        "slug": "st-marys-cathedral-tokyo",
        "title": "東京カテドラル聖マリア大聖堂",
        "titleEn": "St. Mary's Cathedral, Tokyo",
        "buildingTypes": "教会,大聖堂",
        "buildingTypesEn": "Church,Cathedral",
        "location": "東京都文京区",
        "locationEn_from_datasheetChunkEn": "Bunkyo, Tokyo",
        "completionYears": "1964",
        "lat": 35.7141,
        "lng": 139.7266,
        "groups": [103],
    },
    {
        "building_id": 5,
        "slug": "osaka-station-city",
        "title": "大阪ステーションシティ",
        "titleEn": "Osaka Station City",
        "buildingTypes": "駅,商業施設",
        "buildingTypesEn": "Station,Commercial",
        "location": "大阪府大阪市北区",
        "locationEn_from_datasheetChunkEn": "Kita, Osaka",
        "completionYears": "2011",
        "groups": [],
    },
]


async def run_seed():
    settings = get_settings()
    engine = create_engine(settings.database_url, echo=settings.sql_echo)
    sessions = create_session_factory(engine)
    try:
        async with sessions() as session:
            # Idempotent: clear the sample catalog before re-inserting
            for model in (ArchitectComposition, BuildingArchitect, IndividualArchitect, Building):
                await session.execute(delete(model))

            for a in ARCHITECTS:
                session.add(IndividualArchitect(**a))
            for b in BUILDINGS:
                data = {k: v for k, v in b.items() if k != "groups"}
                session.add(Building(**data))
            await session.flush()

            for group_id, members in COMPOSITIONS.items():
                for order_index, individual_id in enumerate(members, start=1):
                    session.add(
                        ArchitectComposition(
                            architect_id=group_id,
                            individual_architect_id=individual_id,
                            order_index=order_index,
                        )
                    )
            for b in BUILDINGS:
                for group_id in b["groups"]:
                    session.add(BuildingArchitect(building_id=b["building_id"], architect_id=group_id))

            await session.commit()
        logger.info("Seeded %s buildings, %s architects", len(BUILDINGS), len(ARCHITECTS))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(run_seed())
    except KeyboardInterrupt:
        logger.warning("Seed cancelled by user")
        sys.exit(0)
