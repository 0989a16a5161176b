from rename_controller import RenameController
from pathlib import Path
import asyncio
import logging
import os

def main():
    logging.basicConfig(level=os.getenv("RENAME_LOG_LEVEL", "INFO").upper())
    controller = RenameController()

    while True:
        # Get the file to rename
        file_path = input("Python file (empty to quit): ").strip()
        if not file_path:
            break
        path = Path(file_path)
        if not path.is_file():
            print(f"No such file: {path}")
            continue

        request_payload = {"input": {"code": path.read_text(encoding="utf-8")}}

        def show_progress(fraction):
            print(f"\rRenaming ... {fraction:.0%}", end="", flush=True)

        result = asyncio.run(controller.get_response(request_payload, on_progress=show_progress))
        print()

        if "error" in result:
            print(f"{result['error_type']}: {result['error']}")
            continue

        # Display the renamed code
        os.system('cls' if os.name == 'nt' else 'clear')
        print("\n\nRenamed Code ...............")
        print(result["code"])
        print("\n\nRenames ...............")
        for original_name, new_name in result["renames"].items():
            print(f"{original_name} -> {new_name}")


if __name__ == "__main__":
    main()
