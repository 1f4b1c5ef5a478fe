"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

# Insert local src directory at the beginning of sys.path
# This ensures that the local routeplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of routeplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("routeplane"):
        del sys.modules[module_name]

import pytest  # noqa: E402

CATS_CONTROLLER = """\
import { Controller, Get, Post, Param, Body } from '@nestjs/common';

@Controller('cats')
export class CatsController {
  @Get()
  findAll() {}

  @Get(':id')
  findOne(@Param('id') id: string) {}

  @Post()
  create(@Body() dto: CreateCatDto) {}
}
"""

DOGS_CONTROLLER = """\
import { Controller, Delete, Param } from '@nestjs/common';

@Controller('dogs')
export class DogsController {
  @Delete(':id')
  remove(@Param('id') id: string) {}
}
"""


@pytest.fixture
def cats_source() -> str:
    return CATS_CONTROLLER


@pytest.fixture
def dogs_source() -> str:
    return DOGS_CONTROLLER


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with two controllers, a service and an excluded dependency."""
    root = tmp_path / "ws"
    (root / "src" / "cats").mkdir(parents=True)
    (root / "src" / "dogs").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)

    (root / "src" / "cats" / "cats.controller.ts").write_text(CATS_CONTROLLER)
    (root / "src" / "dogs" / "dogs.controller.ts").write_text(DOGS_CONTROLLER)
    (root / "src" / "cats" / "cats.service.ts").write_text("export class CatsService {}\n")
    (root / "node_modules" / "lib" / "vendor.controller.ts").write_text(DOGS_CONTROLLER)
    return root
