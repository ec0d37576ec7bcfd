# mcts.py
# UCB1 Monte Carlo Tree Search with uniform random play-outs for the placement game.

import math
import time
import random
import logging

from config import config
from game import Place, opponent_of, placement_space

ROOT = 0
NO_PARENT = -1


class Node:
    """
    A tree node. `piece` is the side whose placement produced this node, so the
    side to move here is its opponent. Win counts are always from the searching
    side's point of view.
    """
    def __init__(self, state, piece, parent=NO_PARENT, move=None):
        self.state, self.piece, self.parent, self.move = state, piece, parent, move
        self.children = []
        self.wins, self.visits = 0, 0
        self.is_leaf, self.is_terminal = True, False

    def to_move(self) -> int:
        return opponent_of(self.piece)

    def win_rate(self) -> float:
        return self.wins / self.visits if self.visits > 0 else 0.0


class SearchTree:
    """Arena of nodes for one search; children and parents are indices into `nodes`."""
    def __init__(self, root_state, root_piece):
        self.nodes = [Node(root_state, root_piece)]

    def __len__(self):
        return len(self.nodes)

    def __getitem__(self, index) -> Node:
        return self.nodes[index]

    def add_child(self, parent: int, state, piece, move) -> int:
        index = len(self.nodes)
        self.nodes.append(Node(state, piece, parent, move))
        self.nodes[parent].children.append(index)
        return index

    def path_to_root(self, index):
        while index != NO_PARENT:
            yield index
            index = self.nodes[index].parent


class MCTS:
    def __init__(self, who, rng=None, exploration_c=config.EXPLORATION_C,
                 check_interval=config.CHECK_INTERVAL, unvisited_score=config.UNVISITED_SCORE):
        self.who = who
        self.opponent = opponent_of(who)
        self.rng = rng if rng is not None else random.Random()
        self.exploration_c = exploration_c
        self.check_interval = check_interval
        self.unvisited_score = unvisited_score
        self.logger = logging.getLogger(f"MCTS-{who}")

    # --- Core MCTS steps ---
    def ucb1(self, tree: SearchTree, index: int) -> float:
        child = tree[index]
        if child.visits == 0:
            return self.unvisited_score
        explore = self.exploration_c * math.sqrt(math.log(tree[child.parent].visits) / child.visits)
        if child.piece == self.who:
            return child.win_rate() + explore
        # The opponent picks this child: prefer low win rates for us.
        return (1.0 - child.win_rate()) + explore

    def select(self, tree: SearchTree, index: int = ROOT) -> int:
        while not tree[index].is_leaf:
            best_index, best_score = None, float('-inf')
            for child in tree[index].children:
                score = self.ucb1(tree, child)
                if score > best_score:
                    best_index, best_score = child, score
            index = best_index
        return index

    def expand(self, tree: SearchTree, index: int) -> int:
        node = tree[index]
        if node.is_terminal:
            return index
        mover = node.to_move()
        for position in range(node.state.size):
            move = Place(position, mover)
            after = node.state.copy()
            if move.is_legal(move.apply(after)):
                tree.add_child(index, after, mover, move)
        if not node.children:
            node.is_terminal = True
            return index
        # Zero-visit siblings are tried in list order, so randomize it once.
        self.rng.shuffle(node.children)
        node.is_leaf = False
        return node.children[0]

    def rollout(self, tree: SearchTree, index: int, spaces) -> int:
        """Plays first-legal moves from the pre-shuffled `spaces` until a side cannot move. 1 = we win."""
        node = tree[index]
        to_move = node.to_move()
        if node.is_terminal:
            return int(to_move != self.who)
        board = node.state.copy()
        while True:
            for move in spaces[to_move]:
                trial = board.copy()
                if move.is_legal(move.apply(trial)):
                    board = trial
                    break
            else:
                # The side unable to move loses.
                return int(to_move != self.who)
            to_move = opponent_of(to_move)

    def backpropagate(self, tree: SearchTree, index: int, score: int):
        # Same score at every depth; UCB1 flips the perspective instead.
        for i in tree.path_to_root(index):
            tree[i].wins += score
            tree[i].visits += 1

    def best_move(self, tree: SearchTree):
        """Move of the first most visited root child, or None."""
        best_move, best_visits = None, -1
        for child in tree[ROOT].children:
            if tree[child].visits > best_visits:
                best_move, best_visits = tree[child].move, tree[child].visits
        return best_move

    # --- Search loop ---
    def search(self, state, time_budget_ms=config.TIME_BUDGET_MS, max_iterations=0):
        """
        Runs select -> expand -> rollout -> backpropagate until the budget is
        spent (checked every `check_interval` iterations) or `max_iterations`
        is reached. Returns the most visited root move, or None if the root
        has no legal move.
        """
        tree = SearchTree(state, self.opponent)
        spaces = {
            self.who: placement_space(state.size, self.who),
            self.opponent: placement_space(state.size, self.opponent),
        }
        budget = time_budget_ms / 1000.0
        start = time.perf_counter()
        iterations = 0
        while True:
            iterations += 1
            leaf = self.select(tree)
            leaf = self.expand(tree, leaf)
            self.rng.shuffle(spaces[self.who])
            self.rng.shuffle(spaces[self.opponent])
            score = self.rollout(tree, leaf, spaces)
            self.backpropagate(tree, leaf, score)

            if tree[ROOT].is_terminal:
                break
            if max_iterations and iterations >= max_iterations:
                break
            if iterations % self.check_interval == 0 and time.perf_counter() - start >= budget:
                break

        best_move = self.best_move(tree)
        self.logger.debug(f"{iterations} iterations, {len(tree)} nodes, "
                          f"{time.perf_counter() - start:.3f}s, chose {best_move}")
        return best_move
