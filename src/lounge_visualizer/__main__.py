#!/usr/bin/env python
# -*- coding: utf-8 -*-

from lounge_visualizer.app import main

main()
