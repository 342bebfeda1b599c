#!/usr/bin/env python3
"""
Simple demo of a locallog store.

Writes a few entries, queries them back, then reopens the store to show that
entries survive a restart.
"""

import tempfile
import time

from locallog import Level, new_local_log
from locallog.core.entry import utc_now


def main():
    print("=" * 60)
    print("locallog - Simple Store Demo")
    print("=" * 60)
    
    with tempfile.TemporaryDirectory() as store_dir:
        print(f"\n[1] Opening store in {store_dir}...")
        log = new_local_log(store_dir, print_to_stdout=True, line_spacing=0)
        
        print("\n[2] Logging entries...")
        log.info("demo started")
        log.warning("cache miss rate at ", 37, "%")
        failure = log.error("could not reach upstream: ", "timeout")
        log.critical("giving up after ", 3, " retries")
        
        # let the display worker catch up before printing query results
        time.sleep(0.1)
        
        print("\n[3] Latest 2 entries:")
        for entry in log.get(utc_now(), Level.ANY, 2):
            print(f"  {entry.level.value:<8} {entry.message}")
        
        print("\n[4] Lookup by id:")
        print(f"  {log.get_by_id(failure.log_id).message}")
        log.close()
        
        print("\n[5] Reopening store...")
        reopened = new_local_log(store_dir)
        recovered = reopened.get(utc_now(), Level.ANY, 100)
        print(f"  recovered {len(recovered)} entries")
        reopened.close()
    
    print("\n" + "=" * 60)
    print("Demo complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
