import logging
import os

from rename_controller import RenameController
import runpod

def main():
    logging.basicConfig(
        level=os.getenv("RENAME_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    controller_instance = RenameController()
    runpod.serverless.start({"handler": controller_instance.get_response})


if __name__ == "__main__":
    main()
