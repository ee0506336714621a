"""
Example: Search the AUR and inspect a package's dependencies.

Usage:
    python examples/inspect_package.py '^yay$'
"""

import asyncio
import sys

from aurkit import AURClient, ClientConfig


async def main(query: str):
    async with AURClient(ClientConfig.from_env()) as aur:
        results = await aur.search(query)
        print(f"{len(results)} packages match {query!r}")

        for name in sorted(results)[:5]:
            pkg = await aur.get(name)
            if pkg is None:
                continue

            pkgbuild = await pkg.get_pkgbuild()
            print(f"\n{name} {pkg.version}")
            for dep in pkgbuild.depends:
                print(f"  depends: {dep}")
            print(f"  builds: {await pkg.package_filename()}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "^yay$"))
