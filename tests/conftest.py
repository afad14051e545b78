"""Shared fixtures: in-memory TSX documents and map builders."""

import base64
import gzip
import struct
from typing import Dict

import pytest

from tmx_reader import ResourceAcquisitionFailure


class DictAcquirer:
    """Serves documents from a dict, recording every path requested."""

    def __init__(self, documents: Dict[str, bytes]):
        self.documents = documents
        self.requested = []

    def acquire(self, path: str) -> bytes:
        self.requested.append(path)
        try:
            return self.documents[path]
        except KeyError:
            raise ResourceAcquisitionFailure(path, "not in fixture set") from None


TERRAIN_TSX = b"""<?xml version="1.0" encoding="UTF-8"?>
<tileset version="1.10" tiledversion="1.10.2" name="terrain" tilewidth="32" tileheight="32"
         tilecount="64" columns="8" spacing="1" margin="2">
 <properties>
  <property name="biome" value="forest"/>
  <property name="layer_hint" type="int" value="2"/>
 </properties>
 <image source="terrain.png" trans="ff00ff" width="256" height="256"/>
 <tile id="0">
  <properties>
   <property name="solid" type="bool" value="true"/>
   <property name="damage" type="int" value="10"/>
  </properties>
 </tile>
 <tile id="5" type="water">
  <properties>
   <property name="speed" type="float" value="0.5"/>
  </properties>
 </tile>
</tileset>
"""

# Claims its own firstgid; the map's reference must win
ITEMS_TSX = b"""<?xml version="1.0" encoding="UTF-8"?>
<tileset firstgid="7" name="items" tilewidth="16" tileheight="16" tilecount="2" columns="0">
 <grid orientation="orthogonal" width="1" height="1"/>
 <tile id="0">
  <image source="items/sword.png" width="16" height="24"/>
 </tile>
 <tile id="1">
  <image source="items/shield.png" width="20" height="16"/>
 </tile>
</tileset>
"""

BAD_PROPERTY_TSX = b"""<?xml version="1.0" encoding="UTF-8"?>
<tileset name="broken" tilewidth="8" tileheight="8" tilecount="1" columns="1">
 <tile id="0">
  <properties>
   <property name="hp" type="int" value="lots"/>
  </properties>
 </tile>
</tileset>
"""


def b64_words(gids, compress=False) -> str:
    raw = struct.pack(f'<{len(gids)}I', *gids)
    if compress:
        raw = gzip.compress(raw)
    return base64.b64encode(raw).decode('ascii')


def build_map(body: str, **attrs) -> bytes:
    """Wrap ``body`` in a <map> element with sensible default attributes."""
    defaults = {
        'version': '1.10',
        'tiledversion': '1.10.2',
        'orientation': 'orthogonal',
        'renderorder': 'right-down',
        'width': '3',
        'height': '2',
        'tilewidth': '32',
        'tileheight': '32',
        'infinite': '0',
    }
    defaults.update(attrs)
    attr_text = ' '.join(f'{key}="{value}"' for key, value in defaults.items())
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<map {attr_text}>\n{body}\n</map>'.encode('utf-8')


def csv_layer(layer_id: int, name: str, gids, width=3, height=2, props: str = '') -> str:
    rows = [','.join(str(g) for g in gids[y * width:(y + 1) * width]) for y in range(height)]
    data = ',\n'.join(rows)
    return (
        f'<layer id="{layer_id}" name="{name}" width="{width}" height="{height}">\n'
        f'{props}'
        f'<data encoding="csv">\n{data}\n</data>\n'
        f'</layer>'
    )


@pytest.fixture
def acquirer() -> DictAcquirer:
    return DictAcquirer({
        'terrain.tsx': TERRAIN_TSX,
        'items.tsx': ITEMS_TSX,
        'broken.tsx': BAD_PROPERTY_TSX,
    })
