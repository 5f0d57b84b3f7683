# -*- coding: utf-8 -*-
"""Define project metadata
"""

__title__ = 'contentstore'
__summary__ = 'A content-addressable object store on the local filesystem.'
__url__ = ''

__version__ = '0.1.0'

__install_requires__ = ['attrs', 'click']
__tests_require__ = ['pytest']

__author__ = 'Justin Keogh'
__email__ = 'github.com@v6y.net'

__license__ = 'MIT License'
