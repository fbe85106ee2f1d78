"""GeoNames 国家和城市数据导入。"""

from .data_pipeline import CityImporter, CountryImporter, GeonamesImporter, ImportSource, ImportSummary

__all__ = [
    "CityImporter",
    "CountryImporter",
    "GeonamesImporter",
    "ImportSource",
    "ImportSummary",
]
