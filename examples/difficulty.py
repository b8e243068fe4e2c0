#!/usr/bin/env python3

"""
simple example: print difficulty and estimated hashrate at each retarget
"""

import datetime

import hashstat
import hashstat.rpc
from hashstat.stats import average_block_time, estimate_hashrate
from hashstat.report import format_hashrate, format_number

def datestr(utime):
    dateFormat = '%Y-%m-%d'
    return datetime.datetime.fromtimestamp(int(utime)).strftime(dateFormat)

def printDifficulty():
    proxy = hashstat.rpc.Proxy()
    interval = hashstat.params.DIFFICULTY_ADJUSTMENT_INTERVAL
    tip = proxy.get_chain_tip_height()
    print('*** Bitcoin difficulty ***')
    prev = proxy.get_header_by_height(0)
    for i in range(interval, tip+1, interval):
        header = proxy.get_header_by_height(i)
        block_time = average_block_time(header.mediantime - prev.mediantime, interval)
        print('%s %s %s' % (datestr(header.mediantime),
                            format_number(prev.difficulty),
                            format_hashrate(estimate_hashrate(prev.difficulty, block_time))))
        prev = header
    proxy.close()

if __name__=='__main__':
    printDifficulty()
